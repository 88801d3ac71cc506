"""
Status Classifier

An inspection is NOK as soon as one of its checklist results is NOK.
Every pass/fail display goes through `classify` so the anomaly rule
lives in one place.
"""

from functools import reduce

from .models import InspectionRecord, InspectionResult, InspectionStatus


def _worst(acc: InspectionStatus, result: InspectionResult) -> InspectionStatus:
    if acc == InspectionStatus.NOK or result.status == InspectionStatus.NOK:
        return InspectionStatus.NOK
    return InspectionStatus.OK


def classify(record: InspectionRecord) -> InspectionStatus:
    """Overall status of a record. Empty results classify as OK."""
    return reduce(_worst, record.results, InspectionStatus.OK)


def has_anomaly(record: InspectionRecord) -> bool:
    return classify(record) == InspectionStatus.NOK


def failed_results(record: InspectionRecord) -> list[InspectionResult]:
    """NOK results in checklist order."""
    return [r for r in record.results if r.status == InspectionStatus.NOK]
