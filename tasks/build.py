import asyncio
from pathlib import Path

BUILD_DIR = Path("build")


def compile_sources(done):
    BUILD_DIR.mkdir(exist_ok=True)
    (BUILD_DIR / "VERSION").write_text("0.1.0\n")
    done()


async def package():
    await asyncio.sleep(0)
    (BUILD_DIR / "PACKAGE").write_text("ok\n")


def setup(scheduler):
    return {
        "compile": {
            "fn": compile_sources,
            "dep": ["lint-python", "lint-docs"],
            "description": "Compile sources into build/",
            "options": {
                "--release": "Build without debug info",
            },
        },
        "package": {
            "fn": package,
            "seq": ["clean", "compile"],
            "description": "Clean, compile, then package",
            "priority": 10,
            "isDefault": True,
        },
        "check": {
            "fn": lambda: None,
            "dep": ["lint-python", "lint-docs"],
            "description": "Run all linters",
            "priority": 5,
            "isDefault": True,
        },
    }
