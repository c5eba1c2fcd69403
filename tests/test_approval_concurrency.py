"""
Racing reviewers against a file-backed database with independent sessions.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from conftest import make_post, make_user
from inkwell.database import Base
from inkwell.events import ALL_EVENTS, EventBus
from inkwell.models.approval import ApprovalAction, ApprovalRequest, ApprovalStatus
from inkwell.models.post import Post
from inkwell.responses import ConflictError
from inkwell.services.approvals import ApprovalService


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def world(session_factory):
    """Author, two reviewers and a draft post, committed."""
    with session_factory() as setup:
        author = make_user(setup, "author@example.com")
        first = make_user(setup, "first@example.com", role="admin")
        second = make_user(setup, "second@example.com", role="admin")
        post = make_post(setup, author, title="Contested")
        return {
            "author_id": author.id,
            "first_id": first.id,
            "second_id": second.id,
            "post_id": post.id,
        }


def recording_bus():
    bus = EventBus()
    bus.events = []
    bus.subscribe(ALL_EVENTS, bus.events.append)
    return bus


class TestRacingReviewers:

    @pytest.mark.parametrize("winner, loser", [
        ("approve", "approve"),
        ("approve", "reject"),
        ("reject", "approve"),
    ])
    def test_only_one_decision_lands(self, session_factory, world, monkeypatch, winner, loser):
        with session_factory() as setup:
            request_id = ApprovalService(setup).create_request(world["post_id"], world["author_id"]).id

        session_a = session_factory()
        session_b = session_factory()
        bus_a = recording_bus()
        service_a = ApprovalService(session_a, bus_a)
        service_b = ApprovalService(session_b)

        original_get = service_a.requests.get
        raced = []

        def get_then_lose_race(rid):
            # Read PENDING, then let the other reviewer commit first
            request = original_get(rid)
            if not raced:
                raced.append(True)
                getattr(service_b, winner)(rid, world["second_id"], "got here first")
            return request

        monkeypatch.setattr(service_a.requests, "get", get_then_lose_race)

        with pytest.raises(ConflictError) as exc_info:
            getattr(service_a, loser)(request_id, world["first_id"], "too late")

        session_a.close()
        session_b.close()

        expected = ApprovalStatus.APPROVED.value if winner == "approve" else ApprovalStatus.REJECTED.value
        assert exc_info.value.status_code == 409
        assert exc_info.value.details["status"] == expected
        assert bus_a.events == []

        with session_factory() as check:
            request = check.get(ApprovalRequest, request_id)
            actions = check.query(ApprovalAction).filter(ApprovalAction.request_id == request_id).all()
            post = check.get(Post, world["post_id"])

            assert request.status == expected
            assert len(actions) == 1
            assert actions[0].approver_id == world["second_id"]
            assert actions[0].comment == "got here first"
            assert post.published is (winner == "approve")

    def test_cancel_loses_to_approval(self, session_factory, world, monkeypatch):
        with session_factory() as setup:
            request_id = ApprovalService(setup).create_request(world["post_id"], world["author_id"]).id

        session_a = session_factory()
        session_b = session_factory()
        service_a = ApprovalService(session_a)
        service_b = ApprovalService(session_b)

        original_get = service_a.requests.get
        raced = []

        def get_then_lose_race(rid):
            request = original_get(rid)
            if not raced:
                raced.append(True)
                service_b.approve(rid, world["second_id"])
            return request

        monkeypatch.setattr(service_a.requests, "get", get_then_lose_race)

        with pytest.raises(ConflictError):
            service_a.cancel(request_id, world["author_id"])

        session_a.close()
        session_b.close()

        with session_factory() as check:
            assert check.get(ApprovalRequest, request_id).status == ApprovalStatus.APPROVED.value
            assert check.get(Post, world["post_id"]).published is True


class TestRacingSubmissions:

    def test_duplicate_submission_maps_to_conflict(self, session_factory, world, monkeypatch):
        session_a = session_factory()
        session_b = session_factory()
        service_a = ApprovalService(session_a)
        service_b = ApprovalService(session_b)

        original_lookup = service_a.requests.get_by_post_id
        raced = []

        def lookup_then_lose_race(post_id):
            if not raced:
                raced.append(True)
                service_b.create_request(post_id, world["author_id"], "first")
                return None
            return original_lookup(post_id)

        monkeypatch.setattr(service_a.requests, "get_by_post_id", lookup_then_lose_race)

        with pytest.raises(ConflictError) as exc_info:
            service_a.create_request(world["post_id"], world["author_id"], "second")

        session_a.close()
        session_b.close()

        assert exc_info.value.details["status"] == ApprovalStatus.PENDING.value
        with session_factory() as check:
            requests = check.query(ApprovalRequest).all()
            assert len(requests) == 1
            assert requests[0].request_message == "first"
