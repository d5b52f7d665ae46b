[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fsnav"
version = "0.1.0"
description = "Filesystem navigator model: scans a directory tree, lays it out as a 3D scene and picks nodes by ray, with small image I/O helpers"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["filesystem", "visualization", "directory-tree", "layout", "image", "tga", "ppm", "rgbe", "stereo"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: File Managers",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
fsnav = "fsnav.app:main"

[tool.hatch.build.targets.wheel]
packages = ["fsnav"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
