"""Tests for saving search results."""

import tempfile
from datetime import datetime
from pathlib import Path
import pandas as pd
from src.insee import export


NOW = datetime(2026, 3, 14, 9, 5, 7)


def make_results():
    return {
        'IPC-2015': {
            'dataset_id': 'IPC-2015',
            'dataset_name': 'Indices des prix',
            'n_idbanks': 3,
            'dimensions': ['SEXE', 'AGE'],
            'idbanks': pd.DataFrame({
                'IDBANK': ['001759970', '001759971', '001759972'],
                'SEXE': ['1', '2', '0'],
                'AGE': ['15-24', '25-49', '50+'],
                'TITLE_FR': ['A', 'B', 'C'],
            })
        },
        'CHOMAGE-TRIM-NATIONAL': {
            'dataset_id': 'CHOMAGE-TRIM-NATIONAL',
            'dataset_name': 'Chomage',
            'n_idbanks': 1,
            'dimensions': ['FREQ'],
            'idbanks': pd.DataFrame({'IDBANK': ['001688370'], 'FREQ': ['T']})
        }
    }


class TestSanitizeKeyword:
    def test_alphanumeric_unchanged(self):
        assert export.sanitize_keyword('Chomage2024') == 'Chomage2024'

    def test_replaces_every_other_character(self):
        assert export.sanitize_keyword("prix à la conso/IPC") == 'prix___la_conso_IPC'

    def test_spaces_and_punctuation(self):
        assert export.sanitize_keyword('taux-de chomage!') == 'taux_de_chomage_'


class TestFormatTimestamp:
    def test_second_resolution(self):
        assert export.format_timestamp(NOW) == '20260314_090507'


class TestBuildOutputPaths:
    """Test filename construction (pure function)."""

    def test_snapshot_and_summary_names(self):
        paths = export.build_output_paths('out', 'prix conso', ['IPC-2015'], '20260314_090507')

        assert paths['snapshot'] == Path('out') / 'prix_conso_20260314_090507.pkl'
        assert paths['summary'] == Path('out') / 'prix_conso_20260314_090507_summary.csv'

    def test_one_path_per_dataset(self):
        paths = export.build_output_paths('out', 'cpi', ['IPC-2015', 'IPC-1998'], 'TS')

        assert paths['datasets'] == {
            'IPC-2015': Path('out') / 'cpi_IPC-2015_TS.csv',
            'IPC-1998': Path('out') / 'cpi_IPC-1998_TS.csv',
        }

    def test_different_timestamps_give_different_names(self):
        first = export.build_output_paths('out', 'cpi', [], '20260314_090507')
        second = export.build_output_paths('out', 'cpi', [], '20260314_090508')

        assert first['snapshot'] != second['snapshot']


class TestBuildSummaryTable:
    def test_one_row_per_dataset_in_order(self):
        summary = export.build_summary_table(make_results())

        assert list(summary['dataset_id']) == ['IPC-2015', 'CHOMAGE-TRIM-NATIONAL']
        assert list(summary['n_idbanks']) == [3, 1]

    def test_dimensions_joined(self):
        summary = export.build_summary_table(make_results())

        assert summary['dimensions'].iloc[0] == 'SEXE; AGE'
        assert summary['dimensions'].iloc[1] == 'FREQ'

    def test_columns(self):
        summary = export.build_summary_table({})

        assert list(summary.columns) == ['dataset_id', 'dataset_name', 'n_idbanks', 'dimensions']
        assert len(summary) == 0


class TestSaveResults:
    """Test file writing into a temporary directory."""

    def test_creates_missing_directory(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            out_dir = Path(tmp_dir) / 'nested' / 'results'

            export.save_results(make_results(), 'cpi', out_dir, now=NOW)

            assert out_dir.is_dir()

    def test_writes_snapshot_summary_and_datasets(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            written = export.save_results(make_results(), 'cpi', tmp_dir, now=NOW)

            assert [p.name for p in written] == [
                'cpi_20260314_090507.pkl',
                'cpi_20260314_090507_summary.csv',
                'cpi_IPC-2015_20260314_090507.csv',
                'cpi_CHOMAGE-TRIM-NATIONAL_20260314_090507.csv',
            ]
            assert all(p.exists() for p in written)

    def test_summary_csv_content(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            written = export.save_results(make_results(), 'cpi', tmp_dir, now=NOW)

            summary = pd.read_csv(written[1])

            assert len(summary) == 2
            assert summary['dimensions'].iloc[0] == 'SEXE; AGE'

    def test_dataset_csv_holds_full_table(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            written = export.save_results(make_results(), 'cpi', tmp_dir, now=NOW)

            table = pd.read_csv(written[2], dtype=str)

            assert list(table.columns) == ['IDBANK', 'SEXE', 'AGE', 'TITLE_FR']
            assert list(table['IDBANK']) == ['001759970', '001759971', '001759972']

    def test_snapshot_round_trip(self):
        results = make_results()
        with tempfile.TemporaryDirectory() as tmp_dir:
            written = export.save_results(results, 'cpi', tmp_dir, now=NOW)

            loaded = export.load_results(written[0])

        assert list(loaded) == list(results)
        for dataset_id, original in results.items():
            reloaded = loaded[dataset_id]
            assert reloaded['dataset_id'] == original['dataset_id']
            assert reloaded['dataset_name'] == original['dataset_name']
            assert reloaded['n_idbanks'] == original['n_idbanks']
            assert reloaded['dimensions'] == original['dimensions']
            pd.testing.assert_frame_equal(reloaded['idbanks'], original['idbanks'])

    def test_same_second_collision_warns(self, capsys):
        with tempfile.TemporaryDirectory() as tmp_dir:
            export.save_results(make_results(), 'cpi', tmp_dir, now=NOW)
            capsys.readouterr()

            export.save_results(make_results(), 'cpi', tmp_dir, now=NOW)

            assert 'already exists' in capsys.readouterr().out
            assert len(list(Path(tmp_dir).iterdir())) == 4
