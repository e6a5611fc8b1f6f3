"""Setup for Make Homer Proud.

Install for development:
    pip install -e ".[test]"

Build a macOS .app bundle:
    pip install py2app
    python setup.py py2app
"""

import sys

from setuptools import setup, find_packages

APP = ["main.py"]
DATA_FILES = []
OPTIONS = {
    "argv_emulation": False,
    "iconfile": None,
    "plist": {
        "CFBundleName": "Make Homer Proud",
        "CFBundleDisplayName": "Make Homer Proud",
        "CFBundleIdentifier": "com.makehomerproud.timer",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "NSHighResolutionCapable": True,
        "LSMinimumSystemVersion": "13.0",
    },
}

bundle_args = {}
if "py2app" in sys.argv:
    bundle_args = dict(
        app=APP,
        data_files=DATA_FILES,
        options={"py2app": OPTIONS},
        setup_requires=["py2app"],
    )

setup(
    name="make-homer-proud",
    version="0.1.0",
    description="Pomodoro timer coached by the Greek gods",
    packages=find_packages(include=["homerproud", "homerproud.*"]),
    python_requires=">=3.11",
    install_requires=[
        "PyQt6>=6.5",
        "httpx>=0.25",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["homerproud = homerproud.__main__:main"],
    },
    **bundle_args,
)
