[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rustline"
version = "0.1.0"
description = "Tools for Jenkins-style pipeline scripts: checking, linting, documentation, CI export and shell execution"
requires-python = ">=3.10"
dependencies = []
keywords = ["ci", "cd", "pipeline", "jenkins", "lint", "github-actions", "gitlab-ci"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rustline = "rustline.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["rustline"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
