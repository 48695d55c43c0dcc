from __future__ import annotations

from unittest.mock import patch

from fcrgen.services.progress import RowProgress, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    with patch('sys.stdout.isatty', return_value=True):
        assert is_tty_enabled() is True
    with patch('sys.stdout.isatty', return_value=False):
        assert is_tty_enabled() is False


def test_disabled_without_tty():
    with patch('fcrgen.services.progress.is_tty_enabled', return_value=False), \
         patch('fcrgen.services.progress.tqdm') as mock_tqdm:
        with RowProgress(3) as progress:
            progress.advance()
            progress.set_postfix(rows=1)
        mock_tqdm.assert_not_called()
        assert progress.enabled is False
        assert progress.done == 1


def test_enabled_with_tty_updates_bar():
    with patch('fcrgen.services.progress.is_tty_enabled', return_value=True), \
         patch('fcrgen.services.progress.tqdm') as mock_tqdm:
        bar = mock_tqdm.return_value
        with RowProgress(2, description="Formatting", unit="row") as progress:
            progress.advance()
            progress.advance()
        mock_tqdm.assert_called_once_with(
            total=2, desc="Formatting", unit="row", leave=False, ncols=80, ascii=True
        )
        assert bar.update.call_count == 2
        bar.close.assert_called_once()
        assert progress.pbar is None
