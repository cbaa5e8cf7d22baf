"""Did-you-mean suggestions for mistyped option and subcommand names.

Distances are computed with the optimal string alignment variant of
the Damerau-Levenshtein distance, so a single transposition of
adjacent characters (``--tiems`` for ``--times``) costs 1, same as a
single insertion, deletion, or substitution.
"""

from boltons.iterutils import unique


DEFAULT_MAX_DISTANCE = 2
DEFAULT_MAX_COUNT = 5


def get_distance(source, target, ignore_case=True):
    """Return the optimal string alignment distance between *source*
    and *target*.

    >>> get_distance('times', 'tims')
    1
    >>> get_distance('times', 'tiems')
    1
    """
    if ignore_case:
        source, target = source.lower(), target.lower()
    if source == target:
        return 0
    len_s, len_t = len(source), len(target)
    if not len_s:
        return len_t
    if not len_t:
        return len_s

    # rows are kept for the previous two lines to allow transpositions
    prev_prev = None
    prev = list(range(len_t + 1))
    for i in range(1, len_s + 1):
        cur = [i] + [0] * len_t
        for j in range(1, len_t + 1):
            cost = 0 if source[i - 1] == target[j - 1] else 1
            cur[j] = min(prev[j] + 1,          # deletion
                         cur[j - 1] + 1,       # insertion
                         prev[j - 1] + cost)   # substitution
            if (prev_prev is not None and i > 1 and j > 1
                    and source[i - 1] == target[j - 2]
                    and source[i - 2] == target[j - 1]):
                cur[j] = min(cur[j], prev_prev[j - 2] + 1)
        prev_prev, prev = prev, cur
    return prev[len_t]


def get_suggestions(name, candidates, max_distance=DEFAULT_MAX_DISTANCE,
                    max_count=DEFAULT_MAX_COUNT):
    """Get the names from *candidates* which are most likely what was
    meant by the unrecognized *name*.

    Candidates within *max_distance* edits are returned, closest
    first, with ties broken alphabetically. At most *max_count*
    suggestions are returned, pass None for no limit. *name* itself is
    never suggested.
    """
    scored = []
    for candidate in unique(candidates):
        if candidate == name:
            continue
        distance = get_distance(name, candidate)
        if distance <= max_distance:
            scored.append((distance, candidate))
    scored.sort()
    ret = [candidate for _, candidate in scored]
    if max_count is not None:
        ret = ret[:max_count]
    return ret


def format_suggestions(suggestions, formatter=None):
    """Render a list of suggestions as a short hint, like ``did you
    mean "--times"?``. Returns an empty string when there are no
    suggestions.
    """
    if not suggestions:
        return ''
    if formatter is not None:
        suggestions = [formatter(s) for s in suggestions]
    quoted = ['"%s"' % s for s in suggestions]
    if len(quoted) == 1:
        return 'did you mean %s?' % quoted[0]
    return 'did you mean one of: %s?' % ', '.join(quoted)
