"""Tunables for the rule-based policies and the lookahead search."""


class HelperConfig:
    """Decision-support configuration."""

    def __init__(
        self,
        promotion_score: int = 30000,  # West round starts if nobody reaches it
        riichi_deposit: int = 1000,
        yaokyuu_keep_threshold: int = 10,  # Kinds that make kokushi worth chasing
        max_search_shanten: int = 3,
    ):
        self.promotion_score = promotion_score
        self.riichi_deposit = riichi_deposit
        self.yaokyuu_keep_threshold = yaokyuu_keep_threshold
        self.max_search_shanten = max_search_shanten

        if max_search_shanten < 0:
            raise ValueError("max_search_shanten must be >= 0")


DEFAULT_CONFIG = HelperConfig()
