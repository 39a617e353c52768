"""
Deterministic row ordering shared by all cleaning stages.
"""
import pandas as pd

from .config import ORDER_TIE_BREAKERS


def sort_events(df: pd.DataFrame, time_col: str = 'start_datetime') -> pd.DataFrame:
    """
    Sort by (participant_id, time_col) with stable tie-breaking.

    Tie-breakers from ORDER_TIE_BREAKERS are appended when present; rows that
    still tie keep their incoming order (merge sort is stable).
    Returns a new DataFrame with a fresh RangeIndex.
    """
    keys = ['participant_id', time_col]
    keys += [col for col in ORDER_TIE_BREAKERS if col in df.columns and col not in keys]
    return df.sort_values(keys, kind='mergesort').reset_index(drop=True)
