"""Tests for meal logging service."""

from datetime import date

import pytest

from meal_scoring.domain.errors import PersistenceError
from meal_scoring.domain.meals import MealType
from meal_scoring.services.meals import MealService
from tests.conftest import (
    InMemoryDailyScoreRepository,
    InMemoryMealRepository,
    make_meal,
)


def test_log_meal_rescores_its_day(
    meal_service: MealService,
    score_repository: InMemoryDailyScoreRepository,
) -> None:
    meal = make_meal("08:00", MealType.BREAKFAST, carb=True, protein=True)

    meal_service.log_meal(meal)

    record = score_repository.scores[("ana", meal.date)]
    assert record.score == 20


def test_log_meal_is_idempotent(
    meal_service: MealService,
    meal_repository: InMemoryMealRepository,
    score_repository: InMemoryDailyScoreRepository,
) -> None:
    meal = make_meal("08:00", MealType.BREAKFAST, carb=True, items="toast, eggs")

    meal_service.log_meal(meal)
    meal_service.log_meal(meal)

    assert len(meal_repository.meals) == 1
    assert len(score_repository.scores) == 1


def test_import_meals_rescores_span_per_user(
    meal_service: MealService,
    score_repository: InMemoryDailyScoreRepository,
) -> None:
    meals = [
        make_meal("08:00", MealType.BREAKFAST, carb=True, day=date(2025, 3, 10)),
        make_meal("13:00", MealType.LUNCH, protein=True, day=date(2025, 3, 12)),
        make_meal("20:00", MealType.DINNER, veggies=True, user_id="bo"),
    ]

    result = meal_service.import_meals(meals)

    assert result.inserted == 3
    assert sorted((s.user_id, s.date) for s in result.scores) == [
        ("ana", date(2025, 3, 10)),
        ("ana", date(2025, 3, 12)),
        ("bo", date(2025, 3, 10)),
    ]
    assert len(score_repository.scores) == 3


def test_import_empty_batch_does_nothing(
    meal_service: MealService,
    score_repository: InMemoryDailyScoreRepository,
) -> None:
    result = meal_service.import_meals([])

    assert result.inserted == 0
    assert result.scores == []
    assert score_repository.upserts == 0


def test_list_meals_ordered_by_date_and_time(meal_service: MealService) -> None:
    meal_service.import_meals(
        [
            make_meal("20:00", MealType.DINNER),
            make_meal("08:00", MealType.BREAKFAST, day=date(2025, 3, 11)),
            make_meal("07:00", MealType.BREAKFAST),
        ]
    )

    meals = meal_service.list_meals("ana", date(2025, 3, 1), date(2025, 3, 31))

    assert [(meal.date.day, meal.time) for meal in meals] == [
        (10, "07:00"),
        (10, "20:00"),
        (11, "08:00"),
    ]


def test_import_failure_reports_days_written_for_earlier_users(
    meal_service: MealService,
    score_repository: InMemoryDailyScoreRepository,
) -> None:
    meals = [
        make_meal("08:00", MealType.BREAKFAST, carb=True, day=date(2025, 3, 10)),
        make_meal("13:00", MealType.LUNCH, protein=True, day=date(2025, 3, 12)),
        make_meal("20:00", MealType.DINNER, user_id="bo", day=date(2025, 3, 11)),
    ]
    score_repository.fail_on.add(date(2025, 3, 11))

    with pytest.raises(PersistenceError) as excinfo:
        meal_service.import_meals(meals)

    assert excinfo.value.written == [date(2025, 3, 10), date(2025, 3, 12)]
    assert set(score_repository.scores) == {
        ("ana", date(2025, 3, 10)),
        ("ana", date(2025, 3, 12)),
    }
