from .fees import KNOWN_COMPONENTS, FeeLedger, FeeMap, round2

__all__ = ["KNOWN_COMPONENTS", "FeeLedger", "FeeMap", "round2"]
