from pathlib import Path
from setuptools import setup
import re


HERE = Path(__file__).parent

PKG_INIT = HERE / "filesizehist" / "__init__.py"


def read_version(init_file: Path) -> str:
    """Read ``__version__`` from the package without importing it.

    Importing would pull in numpy/pandas, which may not be installed yet at
    build time.
    """
    match = re.search(r"^__version__\s*=\s*['\"]([^'\"]+)['\"]", init_file.read_text(encoding="utf-8"), re.M)
    if not match:
        raise RuntimeError(f"Unable to find __version__ in {init_file}")
    return match.group(1)


setup(
    name="filesizehist",
    version=read_version(PKG_INIT),
    description="Logarithmic file size histograms of directory trees with a JSON cache",
    packages=["filesizehist"],
    entry_points={
        'console_scripts': [
            'filesizehist=filesizehist.cli:main',
        ],
    },
    install_requires=[
        "numpy>=1.19.0",
        "pandas>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Operating System :: OS Independent",
        "Topic :: System :: Filesystems",
    ],
)
