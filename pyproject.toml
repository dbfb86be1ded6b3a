[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minotaur"
version = "0.1.0"
description = "Bitmap and distance-field filters that turn grayscale images into plotter-ready paths"
requires-python = ">=3.10"
dependencies = []
keywords = ["image processing", "pen plotter", "vectorization", "skeletonization", "edge detection", "hatching"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Image Processing",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["minotaur"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
