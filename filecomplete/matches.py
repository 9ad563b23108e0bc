def common_prefix(candidates):
    "Returns the longest string which is a prefix of all candidates."
    first = candidates[0]
    max_equal = len(first)

    for other in candidates[1:]:
        i = 0
        while i < max_equal and i < len(other) and first[i] == other[i]:
            i += 1
        max_equal = i

    return first[:max_equal]

class MatchSet():
    """
    Candidates for a word in generation order together with their
    longest common prefix.
    """

    def __init__(self, prefix, candidates):
        self.prefix = prefix
        self.candidates = candidates

    @classmethod
    def from_list(cls, candidates):
        candidates = list(candidates)
        if not candidates:
            return None
        return cls(common_prefix(candidates), candidates)

    @property
    def single(self):
        return len(self.candidates) == 1

    def __len__(self):
        return len(self.candidates)

    def __iter__(self):
        return iter(self.candidates)

def reduce(text, generator):
    """
    Drain the generator for the given text and return a MatchSet, or
    None if the generator did not produce any candidates. If the
    generator provides a close method, it is always invoked.
    """

    candidates = []
    try:
        state = 0
        while True:
            c = generator(text, state)
            if c is None:
                break
            candidates.append(c)
            state += 1
    finally:
        close = getattr(generator, "close", None)
        if close is not None:
            close()

    return MatchSet.from_list(candidates)
