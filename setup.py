from setuptools import find_packages, setup

setup(
    name="xjsso",
    version="0.3.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.24.0",
        "beautifulsoup4>=4.7.1",
        "rich>=10.0.0",
        "keyring>=21.5.0",
        "cryptography>=3.4",
        "python-dotenv>=0.19.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "xjsso=xjsso.__main__:main",
        ],
    },
)

# When updating the version, also:
# - update VERSION in xjsso/version.py
# - set a tag on the update commit
