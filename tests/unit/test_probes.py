"""Unit tests for the ufw probes."""

import subprocess
from unittest.mock import Mock, patch

import pytest

from swaybar_blocks import probes
from swaybar_blocks.errors import ErrorCode, ProbeError


class TestFileHasLine:
    """Test exact line matching in configuration files."""

    def test_enabled_flag_set(self, ufw_conf_enabled):
        """Test ENABLED=yes is found."""
        assert probes.ufw_enabled_flag(ufw_conf_enabled) is True

    def test_enabled_flag_unset(self, ufw_conf_disabled):
        """Test ENABLED=no is not enabled."""
        assert probes.ufw_enabled_flag(ufw_conf_disabled) is False

    def test_partial_match_is_not_a_match(self, tmp_path):
        """Test commented or padded lines do not count."""
        path = tmp_path / "ufw.conf"
        path.write_text("#ENABLED=yes\nENABLED=yes # boot\n ENABLED=yes\n")
        assert probes.ufw_enabled_flag(path) is False

    def test_crlf_line_endings(self, tmp_path):
        """Test Windows line endings are stripped before comparing."""
        path = tmp_path / "ufw.conf"
        path.write_bytes(b"ENABLED=yes\r\n")
        assert probes.ufw_enabled_flag(path) is True

    def test_missing_file(self, tmp_path):
        """Test missing file raises ProbeError instead of crashing."""
        with pytest.raises(ProbeError) as exc_info:
            probes.ufw_enabled_flag(tmp_path / "missing.conf")
        assert exc_info.value.code == ErrorCode.FILE_NOT_FOUND
        assert "missing.conf" in exc_info.value.context["path"]

    def test_permission_denied(self, tmp_path):
        """Test unreadable file raises ProbeError."""
        with patch("builtins.open", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(ProbeError) as exc_info:
                probes.ufw_enabled_flag(tmp_path / "ufw.conf")
        assert exc_info.value.code == ErrorCode.PERMISSION_DENIED

    def test_binary_garbage(self, tmp_path):
        """Test undecodable file raises ProbeError."""
        path = tmp_path / "ufw.conf"
        path.write_bytes(b"\xff\xfe\x00garbage\n")
        with pytest.raises(ProbeError) as exc_info:
            probes.ufw_enabled_flag(path)
        assert exc_info.value.code == ErrorCode.UNEXPECTED_OUTPUT

    def test_killswitch_drop(self, ufw_defaults_drop):
        """Test DROP output policy means killswitch on."""
        assert probes.is_killswitch_active(ufw_defaults_drop) is True

    def test_killswitch_accept(self, ufw_defaults_accept):
        """Test ACCEPT output policy means killswitch off."""
        assert probes.is_killswitch_active(ufw_defaults_accept) is False

    def test_killswitch_unquoted_policy(self, tmp_path):
        """Test the policy value must be quoted exactly as ufw writes it."""
        path = tmp_path / "ufw"
        path.write_text("DEFAULT_OUTPUT_POLICY=DROP\n")
        assert probes.is_killswitch_active(path) is False


class TestUfwServiceActive:
    """Test the systemctl query."""

    @patch('swaybar_blocks.probes.subprocess.run')
    def test_active(self, mock_run, systemctl_active_output):
        """Test running unit is reported active."""
        mock_run.return_value = Mock(stdout=systemctl_active_output, returncode=0)

        assert probes.ufw_service_active() is True

        args, kwargs = mock_run.call_args
        assert args[0] == ["systemctl", "status", "ufw"]
        assert kwargs["env"]["LC_ALL"] == "C"
        assert kwargs["timeout"] == probes.SYSTEMCTL_TIMEOUT

    @patch('swaybar_blocks.probes.subprocess.run')
    def test_inactive(self, mock_run, systemctl_inactive_output):
        """Test stopped unit is inactive despite non-zero exit code."""
        mock_run.return_value = Mock(stdout=systemctl_inactive_output, returncode=3)
        assert probes.ufw_service_active() is False

    @patch('swaybar_blocks.probes.subprocess.run')
    def test_timeout(self, mock_run):
        """Test systemctl timeout raises ProbeError."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="systemctl", timeout=2)

        with pytest.raises(ProbeError) as exc_info:
            probes.ufw_service_active()
        assert exc_info.value.code == ErrorCode.COMMAND_TIMEOUT

    @patch('swaybar_blocks.probes.subprocess.run')
    def test_not_found(self, mock_run):
        """Test missing systemctl raises ProbeError."""
        mock_run.side_effect = FileNotFoundError()

        with pytest.raises(ProbeError) as exc_info:
            probes.ufw_service_active()
        assert exc_info.value.code == ErrorCode.COMMAND_NOT_FOUND

    @patch('swaybar_blocks.probes.subprocess.run')
    def test_non_utf8_output(self, mock_run):
        """Test undecodable output raises ProbeError."""
        mock_run.return_value = Mock(stdout=b"\xff\xfe Active: active ", returncode=0)

        with pytest.raises(ProbeError) as exc_info:
            probes.ufw_service_active()
        assert exc_info.value.code == ErrorCode.UNEXPECTED_OUTPUT


class TestIsUfwActive:
    """Test the combined firewall predicate."""

    @patch('swaybar_blocks.probes.ufw_service_active', return_value=True)
    def test_enabled_and_active(self, mock_active, ufw_conf_enabled):
        """Test both checks passing."""
        assert probes.is_ufw_active(ufw_conf_enabled) is True
        mock_active.assert_called_once_with("ufw")

    @patch('swaybar_blocks.probes.ufw_service_active', return_value=False)
    def test_enabled_but_inactive(self, mock_active, ufw_conf_enabled):
        """Test enabled flag alone is not enough."""
        assert probes.is_ufw_active(ufw_conf_enabled) is False

    @patch('swaybar_blocks.probes.ufw_service_active', return_value=True)
    def test_disabled_skips_service_query(self, mock_active, ufw_conf_disabled):
        """Test disabled flag short-circuits the systemctl query."""
        assert probes.is_ufw_active(ufw_conf_disabled) is False
        mock_active.assert_not_called()
