NAME = "xjsso"
VERSION = "0.3.0"
