from pathlib import Path

import pandas as pd

# run name -> file in the COPSE output directory
COPSE_RUNS = {
    'no_feedbacks': 'COPSE_no_feedbacks.txt',
    'both_feedbacks': 'COPSE_both_feedbacks.txt',
    'combined_feedbacks': 'COPSE_combined_feedbacks.txt',
    'updated_no_fire_feedbacks': 'COPSE_updated_no_fire_feedbacks.txt',
    'updated_no_prod_feedbacks': 'COPSE_updated_no_prod_feedbacks.txt',
}

# Pre-industrial atmospheric CO2 (ppm) that RCO2 is relative to
PAL_CO2_PPM = 280.0


def load_copse_run(filepath):
    """
    Read one precomputed COPSE run (comma separated, one row per time step).

    Adds 'O2_percent' (mrO2 × 100) and, when RCO2 is present, 'CO2_ppm' (RCO2 × 280).
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f'COPSE output not found: {filepath}')
    df = pd.read_csv(filepath)
    missing = {'time_myr', 'mrO2'} - set(df.columns)
    if missing:
        raise ValueError(f'{filepath.name} lacks columns {sorted(missing)}')
    df['O2_percent'] = df['mrO2'] * 100
    if 'RCO2' in df.columns:
        df['CO2_ppm'] = df['RCO2'] * PAL_CO2_PPM
    return df


def load_copse_runs(directory, runs=None):
    """
    Stack several COPSE runs into one long table with a 'run' column.

    Parameters
    ----------
    directory : str or Path
        Folder holding the COPSE_*.txt files.
    runs : sequence of str, optional
        Keys of COPSE_RUNS. Default: all five feedback runs.
    """
    directory = Path(directory)
    runs = list(runs) if runs is not None else list(COPSE_RUNS)
    frames = []
    for run in runs:
        df = load_copse_run(directory / COPSE_RUNS[run])
        df.insert(0, 'run', run)
        frames.append(df)
    return pd.concat(frames, ignore_index=True)
