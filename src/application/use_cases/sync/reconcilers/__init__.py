from src.application.use_cases.sync.reconcilers.animals import AnimalReconciler
from src.application.use_cases.sync.reconcilers.base import EntityReconciler, Rejection
from src.application.use_cases.sync.reconcilers.vaccinations import VaccinationReconciler
from src.application.use_cases.sync.reconcilers.weights import WeightReconciler

__all__ = [
    "AnimalReconciler",
    "EntityReconciler",
    "Rejection",
    "VaccinationReconciler",
    "WeightReconciler",
]
