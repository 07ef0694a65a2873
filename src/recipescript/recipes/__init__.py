"""Demo recipes bundled with the package."""

from importlib import resources
from typing import List

SUFFIX = '.recipe'

def list_demo_recipes() -> List[str]:
    """Names of the bundled demos, sorted"""
    return sorted(
        entry.name[:-len(SUFFIX)]
        for entry in resources.files(__name__).iterdir()
        if entry.name.endswith(SUFFIX)
    )

def load_demo_recipe(name: str) -> str:
    if name not in list_demo_recipes():
        raise KeyError(f"Unknown demo recipe '{name}'. Available: {', '.join(list_demo_recipes())}")
    return resources.files(__name__).joinpath(name + SUFFIX).read_text(encoding='utf-8')
