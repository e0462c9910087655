from bookclub.services.voting.borda import tally_borda
from bookclub.services.voting.plurality import tally_book_options

__all__ = [
    "tally_book_options",
    "tally_borda",
]
