"""Borda count over personal ranking snapshots.

Each member who ranked ``N`` books gives ``N - rank + 1`` points to every book
they ranked, so their first choice earns ``N`` points and their last earns one.
Books marked "not read" (rank ``None``) earn nothing and do not count towards
``N``. Every member is scored against their own ``N``; there is no
normalization across members who ranked different numbers of books.
"""


def build_ballots(rankings):
    """Group ranking rows into ``{user_id: [(book_id, rank), ...]}``.

    Rows without a rank are dropped. Users keep the order in which they first
    appear.
    """
    ballots = {}
    for ranking in rankings:
        if ranking.rank is None:
            continue
        ballots.setdefault(ranking.user_id, []).append((ranking.book_id, ranking.rank))
    return ballots


def tally_borda(rankings):
    """Aggregate ranking rows into one ordered list of book scores.

    ``rankings`` is an iterable of rows with ``user_id``, ``book_id`` and
    ``rank`` attributes. Returns one dict per book that at least one member
    ranked, with ``total_points``, ``number_of_rankings`` and
    ``average_rank``, sorted by points descending and then by average rank
    ascending. Books tied on both keep the order in which they were first seen.
    """
    ballots = build_ballots(rankings)

    books = {}
    for ballot in ballots.values():
        n_ranked = len(ballot)
        for book_id, rank in ballot:
            if not 1 <= rank <= n_ranked:
                continue
            entry = books.setdefault(
                book_id,
                {"book_id": book_id, "total_points": 0, "number_of_rankings": 0, "rank_sum": 0},
            )
            entry["total_points"] += n_ranked - rank + 1
            entry["number_of_rankings"] += 1
            entry["rank_sum"] += rank

    results = []
    for entry in books.values():
        results.append(
            {
                "book_id": entry["book_id"],
                "total_points": entry["total_points"],
                "number_of_rankings": entry["number_of_rankings"],
                "average_rank": entry["rank_sum"] / entry["number_of_rankings"],
            }
        )

    results.sort(key=lambda row: (-row["total_points"], row["average_rank"]))
    return results
