import argparse
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from reel_recipes.app.config import load_settings
from reel_recipes.app.deps import build_recipe_processor
from reel_recipes.app.infra.db.memory_recipes_repo import InMemoryRecipeStore


def main() -> None:
    parser = argparse.ArgumentParser(description="Quick recipe extraction smoke test")
    parser.add_argument("url", nargs="*", default=[
        "https://www.tiktok.com/@chef/video/7301234567890123456?is_from_webapp=1",
        "https://www.instagram.com/reel/C4stLiBL4SS/?igsh=abc",
    ])
    parser.add_argument("--twice", action="store_true", help="Process every URL twice to exercise the cache")
    args = parser.parse_args()

    # Gemini is real, the store is not
    settings = load_settings(RECIPE_STORE="memory")
    processor = build_recipe_processor(settings, InMemoryRecipeStore())

    rounds = 2 if args.twice else 1
    for url in args.url:
        for _ in range(rounds):
            print("\n===", url)
            result = processor.handle(url)
            recipe = result.recipe
            print("cached:", result.cached)
            print("source_url:", recipe.source_url)
            print("title:", recipe.title)
            print("category:", recipe.category, "->", recipe.image_url)
            print("duration:", recipe.duration)
            print("ingredients:", len(recipe.ingredients))
            print("steps:", len(recipe.steps))


if __name__ == "__main__":
    main()
