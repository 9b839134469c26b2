'''
limits for github-api

stolen from: https://github.com/dead-claudia/github-limits

limits refer to amount of codepoints (tested empirically for some samples).
'''

issue_title = 256
pullrequest_body = 262144
label = 50


def fits(
    value: str | bytes,
    /,
    limit: int,
) -> bool:
    return len(value) <= limit
