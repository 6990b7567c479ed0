# scripts/seed.py
"""Dados de demonstração: coaches, workouts das últimas duas semanas e
feedbacks, suficientes para os relatórios terem período atual e anterior.

    python -m scripts.seed [--clients 6] [--days 14]
"""

from __future__ import annotations

import argparse
import random
import uuid
from datetime import timedelta

from sqlalchemy import inspect
from sqlalchemy.orm import Session

import gymbook.db.base  # noqa: F401
from gymbook.db import Database
from gymbook.models.coach import Coach
from gymbook.models.feedback import Feedback
from gymbook.models.workout import Workout, WorkoutStatus
from gymbook.services.availability import SLOT_TEMPLATE
from gymbook.utils.tz import gym_tz, now_local

COACHES_DATA = [
    {
        "first_name": "Kristin",
        "last_name": "Watson",
        "email": "kristin.watson@gymbook.local",
        "title": "Certified personal yoga trainer",
        "type": "Yoga",
        "rating": 4.96,
        "specialization": ["Yoga", "Pilates"],
        "certificates": ["RYT-200"],
    },
    {
        "first_name": "Ramon",
        "last_name": "Hart",
        "email": "ramon.hart@gymbook.local",
        "title": "Climbing and strength coach",
        "type": "Climbing",
        "rating": 4.8,
        "specialization": ["Climbing", "Strength"],
        "certificates": ["IFSC Route Setter L1"],
    },
    {
        "first_name": "Ilona",
        "last_name": "Koval",
        "email": "ilona.koval@gymbook.local",
        "title": "Functional training specialist",
        "type": "Strength and conditioning",
        "rating": 4.7,
        "specialization": ["HIIT", "Mobility"],
        "certificates": ["NSCA-CSCS"],
    },
]

COMMENTS = [
    "Great session, very attentive coach.",
    "Good pace, a bit too intense at the end.",
    "Loved it, booking again next week.",
    "Fine overall.",
]


def tables_exist(db: Session) -> bool:
    names = set(inspect(db.get_bind()).get_table_names())
    return {"coaches", "workouts", "feedbacks"} <= names


def ensure_coaches(db: Session) -> list[Coach]:
    coaches = []
    for data in COACHES_DATA:
        coach = db.query(Coach).filter(Coach.email == data["email"]).one_or_none()
        if coach is None:
            coach = Coach(about="", **data)
            db.add(coach)
            print(f"[Seed] Coach criado: {data['first_name']} {data['last_name']}")
        coaches.append(coach)
    db.commit()
    return coaches


def ensure_workouts(
    db: Session, coaches: list[Coach], clients: list[uuid.UUID], days: int
) -> int:
    tz = gym_tz()
    today = now_local(tz).date()
    rng = random.Random(42)
    created = 0
    for offset in range(-days, 7):
        day = today + timedelta(days=offset)
        for coach in coaches:
            for slot in rng.sample(SLOT_TEMPLATE, k=3):
                exists = (
                    db.query(Workout.id)
                    .filter_by(coach_id=coach.id, date=day, time=slot)
                    .first()
                )
                if exists:
                    continue
                w = Workout(
                    coach_id=coach.id,
                    client_id=rng.choice(clients),
                    type=coach.type,
                    date=day,
                    time=slot,
                )
                if offset < 0:
                    # passado: parte com feedback (Finished), parte aguardando
                    if rng.random() < 0.7:
                        w.client_status = WorkoutStatus.FINISHED
                        w.coach_status = WorkoutStatus.WAITING_FOR_FEEDBACK
                        db.add(w)
                        db.flush()
                        db.add(
                            Feedback(
                                workout_id=w.id,
                                client_id=w.client_id,
                                coach_id=coach.id,
                                rating=rng.randint(3, 5),
                                comment=rng.choice(COMMENTS),
                            )
                        )
                    else:
                        w.client_status = WorkoutStatus.WAITING_FOR_FEEDBACK
                        w.coach_status = WorkoutStatus.WAITING_FOR_FEEDBACK
                db.add(w)
                created += 1
    db.commit()
    return created


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed de dados de demonstração.")
    parser.add_argument("--clients", type=int, default=6)
    parser.add_argument("--days", type=int, default=14, help="dias de histórico")
    args = parser.parse_args()

    database = Database.from_settings()
    with database.session() as db:
        if not tables_exist(db):
            print("[Seed] Tabelas ausentes. Rode `alembic upgrade head` antes.")
            return
        coaches = ensure_coaches(db)
        clients = [uuid.uuid4() for _ in range(args.clients)]
        n = ensure_workouts(db, coaches, clients, args.days)
        print(f"[Seed] {n} workouts criados.")
        print("[Seed] client ids:", ", ".join(str(c) for c in clients))
    database.dispose()


if __name__ == "__main__":
    main()
