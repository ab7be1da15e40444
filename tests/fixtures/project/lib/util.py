from sample import normalize


def tidy(rows):
    return [normalize(r) for r in rows]
