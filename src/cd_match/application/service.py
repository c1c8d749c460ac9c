from src.cd_match.application.referee import MatchReferee

_referee: MatchReferee | None = None


def get_referee() -> MatchReferee:
    global _referee  # noqa: PLW0603
    if _referee is None:
        _referee = MatchReferee()
    return _referee
