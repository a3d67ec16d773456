from datetime import datetime, timedelta

from conftest import register
from mentor.models.exam import Exam, ExamResult
from mentor.models.user import User


def _completed_exam(db, user_id: str, score: float, minutes_ago: int) -> None:
    exam = Exam(
        user_id=user_id,
        technology="Python",
        experience_level="Mid",
        difficulty="intermediate",
        total_questions=10,
        status="completed",
        completed_at=datetime.utcnow() - timedelta(minutes=minutes_ago),
    )
    db.add(exam)
    db.flush()
    db.add(ExamResult(exam_id=exam.id, user_id=user_id, total_score=score, correct_answers=0, incorrect_answers=0))
    db.commit()


def test_dashboard_aggregates_completed_exams(client, admin_headers, db) -> None:
    register(client, email="a@mentorapp.io", name="Alice")
    register(client, email="b@mentorapp.io", name="Bob")
    alice = db.query(User).filter(User.email == "a@mentorapp.io").one()
    bob = db.query(User).filter(User.email == "b@mentorapp.io").one()

    _completed_exam(db, alice.id, 90.0, minutes_ago=3)
    _completed_exam(db, alice.id, 70.0, minutes_ago=2)
    _completed_exam(db, bob.id, 50.0, minutes_ago=1)
    db.add(Exam(user_id=bob.id, technology="Go", experience_level="Mid", difficulty="easy",
                total_questions=5, status="in_progress"))
    db.commit()

    resp = client.get("/api/admin/dashboard", headers=admin_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_users"] == 2
    assert data["total_exams"] == 3
    assert data["avg_score"] == 70
    assert data["top_performers"] == [
        {"user_id": alice.id, "avg_score": 80.0, "exams_count": 2},
        {"user_id": bob.id, "avg_score": 50.0, "exams_count": 1},
    ]
    assert data["exams"][0]["user_name"] == "Bob"


def test_dashboard_empty(client, admin_headers) -> None:
    data = client.get("/api/admin/dashboard", headers=admin_headers).json()
    assert data == {"total_users": 0, "total_exams": 0, "avg_score": 0, "top_performers": [], "exams": []}
