[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tihu"
version = "2.1.0"
description = "Building blocks of a Persian text-to-speech engine: UTF-8 handling, character mapping, tokenizing, MBROLA driving and WAV output"
requires-python = ">=3.10"
dependencies = []
keywords = ["tts", "speech", "persian", "farsi", "mbrola", "tokenizer", "utf-8", "utf-16", "wav"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Natural Language :: Persian",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Speech",
    "Topic :: Text Processing :: Linguistic",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tihu"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
