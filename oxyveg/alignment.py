import numpy as np
import pandas as pd

from oxyveg.results import ReferenceLevelError
from oxyveg.scenarios import Scenario
from oxyveg.utilities import REFERENCE_O2


def check_unique_levels(oxygen_levels):
    """Oxygen levels label rows, so a sweep may list each level only once."""
    levels = np.asarray(list(oxygen_levels), dtype=float)
    values, counts = np.unique(levels, return_counts=True)
    if np.any(counts > 1):
        raise ValueError(f'Repeated oxygen levels in sweep: {values[counts > 1].tolist()}')
    return levels


def check_reference(oxygen_levels, reference=REFERENCE_O2):
    """Fail before any I/O when the sweep repeats a level or lacks the reference level."""
    n_ref = int(np.sum(np.asarray(list(oxygen_levels), dtype=float) == reference))
    if n_ref != 1:
        raise ReferenceLevelError(f'Reference oxygen level {reference}% not found in oxygen vector.')
    check_unique_levels(oxygen_levels)


def intersect_levels(level_sets):
    """Levels present in every set, in the order of the first one."""
    level_sets = [list(levels) for levels in level_sets]
    if not level_sets:
        return []
    common = set(level_sets[0]).intersection(*level_sets[1:])
    return [ox for ox in level_sets[0] if ox in common]

# ========================================================================================================================
# Function align_variables
# ========================================================================================================================

def align_variables(series_per_variable, reference=REFERENCE_O2):
    """
    Put the oxygen series of several variables on common rows and normalise them.

    Parameters
    ----------
    series_per_variable : dict
        {variable: pd.Series indexed by O2}, as returned by collect_scenario.
    reference : float
        Normalisation level (%). Default 20.95.

    Returns
    -------
    pd.DataFrame
        Indexed by 'O2' (levels valid for every variable), columns
        '{variable}_val' and '{variable}_norm' where norm = val / val[reference].

    Raises
    ------
    ReferenceLevelError
        If the reference level is not valid for every variable.
    """
    if not series_per_variable:
        raise ValueError('No variables to align')
    levels = intersect_levels(series.index for series in series_per_variable.values())
    if reference not in levels:
        raise ReferenceLevelError(f'Reference O2={reference} missing after skipping failed levels!')

    table = pd.DataFrame(index=pd.Index(levels, name='O2', dtype=float))
    for variable, series in series_per_variable.items():
        values = series.loc[levels].to_numpy(dtype=float)
        table[f'{variable}_val'] = values
        table[f'{variable}_norm'] = values / series.loc[reference]
    return table

# ========================================================================================================================
# Function align_scenarios
# ========================================================================================================================

def _scenario_label(scenario):
    try:
        return Scenario(scenario).label
    except ValueError:
        return str(scenario).upper()


def align_scenarios(tables, reference=REFERENCE_O2):
    """
    Combine the aligned tables of several scenarios into one sheet.

    Only the oxygen levels valid for every scenario are kept, so the final rows
    are valid for every scenario and every variable at once.

    Parameters
    ----------
    tables : dict
        {scenario: table from align_variables}, in column order.

    Returns
    -------
    pd.DataFrame
        Columns 'O2', then '{SCENARIO}_{variable}_val' and '{SCENARIO}_{variable}_norm'.
    """
    if not tables:
        raise ValueError('No scenarios to align')
    levels = intersect_levels(table.index for table in tables.values())
    if reference not in levels:
        raise ReferenceLevelError(f'Reference O2={reference} missing after aligning scenarios!')

    parts = [pd.DataFrame({'O2': levels})]
    for scenario, table in tables.items():
        part = table.loc[levels].reset_index(drop=True)
        part.columns = [f'{_scenario_label(scenario)}_{column}' for column in part.columns]
        parts.append(part)
    return pd.concat(parts, axis=1)
