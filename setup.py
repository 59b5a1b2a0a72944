# setup.py
"""
Veritas content credibility scoring engine
Complete setup configuration for installation and distribution.
"""

from setuptools import setup, find_packages
import os

# Read README for long description
this_directory = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_directory, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

# Read requirements from requirements.txt
def read_requirements(filename):
    """Read requirements from file, ignoring comments and empty lines."""
    requirements = []
    path = os.path.join(this_directory, filename)
    if os.path.exists(path):
        with open(path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    requirements.append(line)
    return requirements

setup(
    name="veritas-credibility",
    version="0.1.0",
    description="Veritas: heuristic, explainable credibility scoring for web pages and pasted text",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Veritas Development Team",
    author_email="veritas-team@example.com",
    url="https://github.com/your-org/veritas",
    license="MIT",
    # Core package structure
    packages=find_packages(where="src") + ["scripts"],
    package_dir={
        "": "src",
        "scripts": "scripts"
    },
    python_requires=">=3.10",
    install_requires=read_requirements("requirements.txt"),
    extras_require={
        "dev": read_requirements("requirements-dev.txt"),
    },
    entry_points={
        "console_scripts": [
            "veritas-analyze=scripts.veritas_analyze:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Information Technology",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Text Processing :: Markup :: HTML",
        "Topic :: Utilities",
    ],
    keywords="credibility misinformation media-literacy readability html-extraction",
    project_urls={
        "Documentation": "https://github.com/your-org/veritas/blob/main/README.md",
        "Source": "https://github.com/your-org/veritas",
        "Tracker": "https://github.com/your-org/veritas/issues",
    },
    zip_safe=False,
)
