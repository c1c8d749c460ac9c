from src.cd_queue.application.matchmaker import Matchmaker

_matchmaker: Matchmaker | None = None


def get_matchmaker() -> Matchmaker:
    global _matchmaker  # noqa: PLW0603
    if _matchmaker is None:
        _matchmaker = Matchmaker()
    return _matchmaker
