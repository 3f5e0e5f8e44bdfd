"""Risk classification for file operations."""

from core.models import OperationKind

from .models import RiskLevel


def classify(kind: OperationKind, target_exists: bool, command_is_dangerous: bool) -> RiskLevel:
    """
    Classify the risk of an operation.

    Args:
        kind: The operation kind
        target_exists: Whether the target path already exists (write/create)
        command_is_dangerous: Whether the command matches the dangerous list (execute)

    Returns:
        RiskLevel for the operation; unrecognized kinds are DANGEROUS
    """
    if kind in (OperationKind.READ, OperationKind.LIST):
        return RiskLevel.SAFE

    if kind in (OperationKind.WRITE, OperationKind.CREATE):
        return RiskLevel.DANGEROUS if target_exists else RiskLevel.MODERATE

    if kind == OperationKind.DELETE:
        return RiskLevel.DANGEROUS

    if kind == OperationKind.EXECUTE:
        return RiskLevel.DANGEROUS if command_is_dangerous else RiskLevel.MODERATE

    return RiskLevel.DANGEROUS


RISK_DESCRIPTIONS = {
    RiskLevel.SAFE: "Safe (read only)",
    RiskLevel.MODERATE: "Moderate (creates new data)",
    RiskLevel.DANGEROUS: "Dangerous (modifies or deletes existing data)",
}


def describe_risk(risk: RiskLevel) -> str:
    return RISK_DESCRIPTIONS.get(risk, "Unknown")
