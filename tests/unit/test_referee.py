"""Unit tests for MatchReferee: submissions, settlement and timeout draws."""

import asyncio
from datetime import datetime, timedelta

import pytest

from src.cd_account.domain.constants import PLATFORM_FEE_USER_ID
from src.cd_common.enums import MatchOutcome, MatchStatus, TransactionType
from src.cd_common.errors import (
    AlreadySubmittedError,
    MatchNotActiveError,
    MatchNotFoundError,
    NotParticipantError,
    OpponentNotFoundError,
)
from src.cd_match.application.referee import MatchReferee
from src.cd_queue.application.matchmaker import Matchmaker

from fakes import (
    T0,
    FakeMatchRepository,
    FakeProblemCatalog,
    FakeQueueRepository,
    FakeSession,
    FakeStore,
    FakeUserRepository,
    RecordingReporter,
)


@pytest.fixture
def referee(store: FakeStore, reporter: RecordingReporter) -> MatchReferee:
    return MatchReferee(
        users=FakeUserRepository(store), matches=FakeMatchRepository(store), reporter=reporter
    )


@pytest.fixture
async def match_id(store: FakeStore, session: FakeSession, reporter: RecordingReporter) -> str:
    """alice (player1) vs bob (player2), 1000 cents each, started at T0."""
    matchmaker = Matchmaker(
        users=FakeUserRepository(store),
        queue=FakeQueueRepository(store),
        matches=FakeMatchRepository(store),
        catalog=FakeProblemCatalog(),
        reporter=reporter,
    )
    store.add_user("alice", rating=1000)
    store.add_user("bob", rating=1000)
    await matchmaker.join_queue(session, "alice", 1000, now=T0)
    result = await matchmaker.join_queue(session, "bob", 1000, now=T0)
    return result.match_id


def _at(seconds: int) -> datetime:
    return T0 + timedelta(seconds=seconds)


class TestFirstCorrectSubmissionWins:
    async def test_correct_first_submission_wins_immediately(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        result = await referee.submit_solution(
            session, match_id, "alice", "print(1)", "python", True, now=_at(60)
        )

        assert result.success is True
        assert result.match_status == MatchStatus.COMPLETED
        assert result.winner_id == "alice"
        assert result.winner_username == "alice_name"
        match = store.matches[match_id]
        assert match.status == MatchStatus.COMPLETED
        assert match.outcome == MatchOutcome.WIN
        assert match.completed_at == _at(60)
        assert match.player1_submitted is True
        assert match.player2_submitted is False

    async def test_winner_paid_and_platform_credited(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        await referee.submit_solution(session, match_id, "alice", "x", "python", True, now=_at(60))

        assert store.users["alice"].wallet_balance == 9000 + 1800
        assert store.users["bob"].wallet_balance == 9000
        assert store.users[PLATFORM_FEE_USER_ID].wallet_balance == 200
        by_type = {t.tx_type: t for t in store.txs_for(match_id) if t.amount > 0}
        assert by_type[TransactionType.PRIZE_WIN].user_id == "alice"
        assert by_type[TransactionType.PRIZE_WIN].amount == 1800
        assert by_type[TransactionType.PLATFORM_FEE].user_id == PLATFORM_FEE_USER_ID
        assert by_type[TransactionType.PLATFORM_FEE].amount == 200
        assert store.wallet_total() + store.active_escrow() == store.deposit_total()

    async def test_ratings_and_records_updated(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        await referee.submit_solution(session, match_id, "bob", "x", "go", True, now=_at(60))

        bob, alice = store.users["bob"], store.users["alice"]
        assert (bob.rating, bob.wins, bob.losses) == (1025, 1, 0)
        assert (alice.rating, alice.wins, alice.losses) == (985, 0, 1)

    async def test_loser_rating_floors_at_zero(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        store.users["alice"].rating = 10
        store.commit()

        await referee.submit_solution(session, match_id, "bob", "x", "go", True, now=_at(60))

        assert store.users["alice"].rating == 0

    async def test_completion_drops_the_match_lock(
        self,
        referee: MatchReferee,
        session: FakeSession,
        match_id: str,
        reporter: RecordingReporter,
    ) -> None:
        await referee.submit_solution(session, match_id, "alice", "x", "python", True, now=_at(1))

        assert match_id not in referee._match_locks
        assert reporter.breadcrumbs[-1][1] == "Match completed with winner"


class TestIncorrectSubmissions:
    async def test_incorrect_then_correct_opponent_wins(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        first = await referee.submit_solution(
            session, match_id, "alice", "x", "python", False, now=_at(30)
        )
        assert first.match_status == MatchStatus.ACTIVE
        assert first.winner_id is None

        second = await referee.submit_solution(
            session, match_id, "bob", "y", "rust", True, now=_at(90)
        )

        assert second.match_status == MatchStatus.COMPLETED
        assert second.winner_id == "bob"
        assert store.users["bob"].wallet_balance == 10800

    async def test_both_incorrect_leaves_match_active(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        await referee.submit_solution(session, match_id, "alice", "x", "python", False, now=_at(30))
        result = await referee.submit_solution(
            session, match_id, "bob", "y", "python", False, now=_at(40)
        )

        assert result.match_status == MatchStatus.ACTIVE
        match = store.matches[match_id]
        assert match.status == MatchStatus.ACTIVE
        assert match.player1_submitted and match.player2_submitted
        assert match.winner_id is None
        # Escrow stays held
        assert store.users["alice"].wallet_balance == 9000
        assert store.users["bob"].wallet_balance == 9000


class TestSubmissionRejections:
    async def test_unknown_match(self, referee: MatchReferee, session: FakeSession) -> None:
        with pytest.raises(MatchNotFoundError):
            await referee.submit_solution(session, "missing", "alice", "x", "py", True)

    async def test_outsider_rejected(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        store.add_user("mallory")
        with pytest.raises(NotParticipantError):
            await referee.submit_solution(session, match_id, "mallory", "x", "py", True)

    async def test_second_submission_rejected(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        await referee.submit_solution(session, match_id, "alice", "x", "python", False, now=_at(5))

        with pytest.raises(AlreadySubmittedError):
            await referee.submit_solution(
                session, match_id, "alice", "x2", "python", True, now=_at(6)
            )
        assert len([k for k in store.submissions if k[0] == match_id]) == 1

    async def test_submission_after_completion_has_no_effect(
        self,
        referee: MatchReferee,
        store: FakeStore,
        session: FakeSession,
        match_id: str,
        reporter: RecordingReporter,
    ) -> None:
        await referee.submit_solution(session, match_id, "alice", "x", "python", True, now=_at(5))
        balances = {uid: u.wallet_balance for uid, u in store.users.items()}
        tx_count = len(store.transactions)

        with pytest.raises(MatchNotActiveError):
            await referee.submit_solution(session, match_id, "bob", "y", "python", True, now=_at(6))

        assert {uid: u.wallet_balance for uid, u in store.users.items()} == balances
        assert len(store.transactions) == tx_count
        assert store.matches[match_id].winner_id == "alice"
        assert reporter.captured[-1][0] == "submit_solution"

    async def test_missing_player_record_rolls_back(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        del store.users["bob"]
        store.commit()

        with pytest.raises(OpponentNotFoundError):
            await referee.submit_solution(session, match_id, "alice", "x", "py", True, now=_at(5))

        match = store.matches[match_id]
        assert match.status == MatchStatus.ACTIVE
        assert match.player1_submitted is False
        assert store.users["alice"].wallet_balance == 9000


class TestQueries:
    async def test_get_match_for_participant(
        self, referee: MatchReferee, session: FakeSession, match_id: str
    ) -> None:
        match = await referee.get_match(session, match_id, "bob")
        assert match.id == match_id

    async def test_get_match_for_outsider(
        self, referee: MatchReferee, session: FakeSession, match_id: str
    ) -> None:
        with pytest.raises(NotParticipantError):
            await referee.get_match(session, match_id, "mallory")

    async def test_active_match_lookup(
        self, referee: MatchReferee, session: FakeSession, match_id: str
    ) -> None:
        active = await referee.get_active_match(session, "alice")
        assert active is not None and active.id == match_id
        assert await referee.get_active_match(session, "nobody") is None


class TestExpireStaleMatches:
    async def test_stale_match_becomes_refunded_draw(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        expired = await referee.expire_stale_matches(session, now=_at(3601))

        assert expired == 1
        match = store.matches[match_id]
        assert match.status == MatchStatus.COMPLETED
        assert match.outcome == MatchOutcome.DRAW
        assert match.winner_id is None
        for user_id in ("alice", "bob"):
            user = store.users[user_id]
            assert user.wallet_balance == 10000
            assert (user.rating, user.wins, user.losses) == (1000, 0, 0)
        refunds = [
            t for t in store.txs_for(match_id) if t.tx_type == TransactionType.ENTRY_FEE_REFUND
        ]
        assert len(refunds) == 2
        assert store.users[PLATFORM_FEE_USER_ID].wallet_balance == 0
        assert store.wallet_total() + store.active_escrow() == store.deposit_total()

    async def test_fresh_match_untouched(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        assert await referee.expire_stale_matches(session, now=_at(3599)) == 0
        assert store.matches[match_id].status == MatchStatus.ACTIVE

    async def test_completed_match_is_not_expired_again(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        await referee.submit_solution(session, match_id, "alice", "x", "python", True, now=_at(5))

        assert await referee.expire_match(session, match_id, now=_at(4000)) is False
        assert store.matches[match_id].outcome == MatchOutcome.WIN


class TestConcurrentSubmissions:
    async def test_racing_correct_submissions_settle_once(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        results = await asyncio.gather(
            referee.submit_solution(session, match_id, "alice", "x", "python", True, now=_at(10)),
            referee.submit_solution(session, match_id, "bob", "y", "python", True, now=_at(10)),
            return_exceptions=True,
        )

        winners = [r for r in results if not isinstance(r, Exception) and r.winner_id]
        errors = [r for r in results if isinstance(r, Exception)]
        assert len(winners) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], MatchNotActiveError)
        assert store.matches[match_id].winner_id == winners[0].winner_id

        txs = store.txs_for(match_id)
        assert len([t for t in txs if t.tx_type == TransactionType.PRIZE_WIN]) == 1
        assert len([t for t in txs if t.tx_type == TransactionType.PLATFORM_FEE]) == 1
        assert store.wallet_total() + store.active_escrow() == store.deposit_total()


class TestMatchLockLifetime:
    async def test_unknown_match_ids_leave_no_locks(
        self, referee: MatchReferee, session: FakeSession
    ) -> None:
        for i in range(1000):
            with pytest.raises(MatchNotFoundError):
                await referee.submit_solution(session, f"bogus-{i}", "alice", "x", "py", True)

        assert referee._match_locks == {}
        assert referee._lock_users == {}

    async def test_rejected_submissions_leave_no_locks(
        self, referee: MatchReferee, store: FakeStore, session: FakeSession, match_id: str
    ) -> None:
        store.add_user("mallory")
        with pytest.raises(NotParticipantError):
            await referee.submit_solution(session, match_id, "mallory", "x", "py", True)
        await referee.submit_solution(session, match_id, "alice", "x", "py", False, now=_at(5))
        with pytest.raises(AlreadySubmittedError):
            await referee.submit_solution(session, match_id, "alice", "x", "py", True, now=_at(6))

        assert store.matches[match_id].status == MatchStatus.ACTIVE
        assert referee._match_locks == {}

    async def test_lock_kept_while_a_waiter_remains(
        self, referee: MatchReferee, session: FakeSession, match_id: str
    ) -> None:
        async with referee._match_lock(match_id):
            waiter = asyncio.create_task(
                referee.submit_solution(session, match_id, "alice", "x", "py", False, now=_at(5))
            )
            await asyncio.sleep(0)
            assert referee._lock_users[match_id] == 2

        result = await waiter
        assert result.match_status == MatchStatus.ACTIVE
        assert match_id not in referee._match_locks
        assert match_id not in referee._lock_users
