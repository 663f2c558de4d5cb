[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xv6kit"
version = "0.1.0"
description = "Models of a small x86 teaching Unix: paging and segments, ELF headers, a shell parser, user utilities, an allocator and a shared-memory registry"
requires-python = ">=3.10"
dependencies = []
keywords = ["operating-system", "paging", "x86", "shell", "grep", "elf", "malloc", "teaching"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xv6-grep = "xv6kit.grep:main"
xv6-wc = "xv6kit.textutils:wc_main"
xv6-cat = "xv6kit.textutils:cat_main"
xv6-echo = "xv6kit.textutils:echo_main"
xv6-ls = "xv6kit.textutils:ls_main"

[tool.hatch.build.targets.wheel]
packages = ["xv6kit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
