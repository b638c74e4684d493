[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "divvunrt"
version = "0.1.0"
description = "Pipeline definitions, CG3 stream helpers, console status output and markdown debug reports for language-technology pipelines"
requires-python = ">=3.10"
dependencies = []
keywords = ["pipeline", "linguistics", "cg3", "constraint-grammar", "nlp"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Linguistic",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["divvunrt"]

[tool.pytest.ini_options]
addopts = "-ra"
