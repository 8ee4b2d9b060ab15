import pytest

from oxyveg.copse import COPSE_RUNS, load_copse_run, load_copse_runs


def _write_run(path, o2=(0.21, 0.25), rco2=(1.0, 2.0)):
    rows = ['time_myr,mrO2,RCO2'] + [f'{-100 + i},{o},{c}' for i, (o, c) in enumerate(zip(o2, rco2))]
    path.write_text('\n'.join(rows) + '\n')
    return path


def test_load_run_adds_units(tmp_path):
    df = load_copse_run(_write_run(tmp_path / 'run.txt'))
    assert df['O2_percent'].tolist() == pytest.approx([21.0, 25.0])
    assert df['CO2_ppm'].tolist() == pytest.approx([280.0, 560.0])


def test_load_run_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_copse_run(tmp_path / 'absent.txt')
    bad = tmp_path / 'bad.txt'
    bad.write_text('time_myr,pO2\n0,1\n')
    with pytest.raises(ValueError):
        load_copse_run(bad)


def test_load_runs_stacks_with_run_column(tmp_path):
    for name in COPSE_RUNS.values():
        _write_run(tmp_path / name)
    df = load_copse_runs(tmp_path)
    assert len(df) == 2 * len(COPSE_RUNS)
    assert df.columns[0] == 'run'
    assert df['run'].unique().tolist() == list(COPSE_RUNS)

    subset = load_copse_runs(tmp_path, runs=['no_feedbacks'])
    assert set(subset['run']) == {'no_feedbacks'}
