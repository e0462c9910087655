def _creation_order(option):
    return (option.created_at, option.id)


def tally_book_options(options, user_id=None):
    """Order a meeting's book options for display.

    Options are ranked by vote count, highest first. Options with equal counts
    keep the order in which they were nominated.
    """
    ordered = sorted(options, key=_creation_order)
    option_counts = {option.id: len(option.votes) for option in ordered}

    total_votes = sum(option_counts.values())
    max_votes = max(option_counts.values(), default=0)

    leaders = []
    if max_votes > 0:
        leaders = [option for option in ordered if option_counts[option.id] == max_votes]

    option_results = []
    for option in ordered:
        count = option_counts[option.id]
        percent = (count / total_votes * 100) if total_votes > 0 else 0
        option_results.append(
            {
                "option": option,
                "count": count,
                "percent": percent,
                "user_has_voted": user_id is not None
                and any(vote.user_id == user_id for vote in option.votes),
            }
        )

    # list.sort is stable, so equal counts stay in nomination order.
    option_results.sort(key=lambda row: -row["count"])

    return {
        "total_votes": total_votes,
        "option_results": option_results,
        "leader": leaders[0] if len(leaders) == 1 else None,
        "leaders": leaders,
        "is_tie": len(leaders) > 1,
        "top_vote_count": max_votes,
    }
