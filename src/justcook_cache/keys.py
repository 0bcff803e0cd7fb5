"""Cache key builders.

Every cache class gets exactly one builder so that equal requests always
produce byte-identical keys and collide on the same entry and lock.
Missing optional parameters map to a fixed sentinel instead of being
dropped, e.g. ``trending()`` is ``"trending:all"``.
"""

ALL_LANGUAGES = "all"
FIRST_PAGE = 1


class CacheKeys:
    """Namespace of key builders, one per cache class."""

    @staticmethod
    def trending(language: str | None = None) -> str:
        return f"trending:{language or ALL_LANGUAGES}"

    @staticmethod
    def discover(language: str | None = None, page: int | None = None) -> str:
        return f"discover:{language or ALL_LANGUAGES}:{page or FIRST_PAGE}"

    @staticmethod
    def chef_profile(username: str) -> str:
        return f"chef:{username}"

    @staticmethod
    def recipe_stats(recipe_id: str) -> str:
        return f"recipe:stats:{recipe_id}"

    @staticmethod
    def recipe_votes(recipe_id: str) -> str:
        return f"recipe:votes:{recipe_id}"

    @staticmethod
    def categories() -> str:
        return "categories:all"


cache_keys = CacheKeys()

__all__ = ["ALL_LANGUAGES", "FIRST_PAGE", "CacheKeys", "cache_keys"]
