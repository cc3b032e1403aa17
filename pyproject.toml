[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "broomkit"
version = "0.1.0"
description = "Asset tools for a 2D shooter: LAG image packs, wave packs, map event files, config and HUD logic"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["lag", "image-pack", "bitmap", "wave", "game-assets", "pixel-format"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
broomkit-lagutil = "broomkit.lagutil:main"
broomkit-mapconv = "broomkit.mapconv:main"
broomkit-wavepack = "broomkit.wavepack:main"
broomkit-config = "broomkit.config:main"

[tool.hatch.build.targets.wheel]
packages = ["broomkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
