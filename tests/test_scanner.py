"""Tests for single-file scanning and the silent skip policy."""

import os

import pytest

from sandworm.models import (
    STATUS_EMPTY,
    STATUS_NOT_FILE,
    STATUS_PARTIAL,
    STATUS_SCANNED,
    STATUS_TOO_LARGE,
    STATUS_UNREADABLE,
)
from sandworm.scanner import (
    PREVIEW_CHARS,
    TRUNCATION_MARKER,
    make_preview,
    scan_file,
    scan_file_findings,
)

PAYLOAD_LINE = 'x' + ' ' * 60 + 'y'
BINARY_JUNK = b'\x89PNG\r\n\x1a\n\xff\xfe\x00\x00\xc3\x28'


class TestScanFile:
    def test_single_payload_line(self, write_file):
        path = write_file('a.js', PAYLOAD_LINE)
        result = scan_file(path, min_whitespace=50)
        assert result.status == STATUS_SCANNED
        assert len(result.findings) == 1
        f = result.findings[0]
        assert f.path == path
        assert f.line_num == 1
        assert f.ws_count == 60
        assert f.line_preview == PAYLOAD_LINE

    def test_clean_file(self, write_file):
        path = write_file('clean.py', 'def f():\n    return 1\n')
        result = scan_file(path)
        assert result.status == STATUS_SCANNED
        assert result.findings == []

    def test_49_spaces_not_flagged(self, write_file):
        path = write_file('edge.txt', ' ' * 49)
        assert scan_file_findings(path, min_whitespace=50) == []

    def test_50_spaces_flagged(self, write_file):
        path = write_file('edge.txt', ' ' * 50)
        findings = scan_file_findings(path, min_whitespace=50)
        assert len(findings) == 1
        assert findings[0].ws_count == 50

    def test_line_numbers_are_one_based_and_ordered(self, write_file):
        lines = ['ok', PAYLOAD_LINE, 'ok', 'ok', PAYLOAD_LINE, PAYLOAD_LINE]
        path = write_file('multi.js', '\n'.join(lines) + '\n')
        findings = scan_file_findings(path)
        assert [f.line_num for f in findings] == [2, 5, 6]

    def test_one_finding_per_line(self, write_file):
        line = 'a' + ' ' * 70 + 'b' + ' ' * 80 + 'c'
        path = write_file('twice.js', line)
        findings = scan_file_findings(path)
        assert len(findings) == 1
        assert findings[0].ws_count == 70

    def test_crlf_line_endings(self, write_file):
        path = write_file('win.js', 'ok\r\n' + PAYLOAD_LINE + '\r\n')
        findings = scan_file_findings(path)
        assert len(findings) == 1
        assert findings[0].line_num == 2
        assert not findings[0].line_preview.endswith('\r')

    def test_trailing_whitespace_before_crlf(self, write_file):
        path = write_file('trail.js', 'code;' + ' ' * 55 + '\r\n')
        findings = scan_file_findings(path)
        assert findings[0].ws_count == 55

    def test_multibyte_text(self, write_file):
        path = write_file('utf8.txt', 'héllo' + ' ' * 51 + '世界\n')
        findings = scan_file_findings(path)
        assert findings[0].ws_count == 51

    def test_custom_threshold(self, write_file):
        path = write_file('short.js', 'a' + ' ' * 10 + 'b')
        assert scan_file_findings(path, min_whitespace=50) == []
        assert len(scan_file_findings(path, min_whitespace=10)) == 1


class TestSkipPolicy:
    def test_missing_file(self, tmp_path):
        result = scan_file(tmp_path / 'nope.txt')
        assert result.status == STATUS_UNREADABLE
        assert result.findings == []
        assert result.skipped

    def test_directory(self, tmp_path):
        result = scan_file(tmp_path)
        assert result.status == STATUS_NOT_FILE
        assert result.findings == []

    def test_empty_file(self, write_file):
        path = write_file('empty.txt', '')
        result = scan_file(path)
        assert result.status == STATUS_EMPTY
        assert result.findings == []

    def test_too_large(self, write_file):
        path = write_file('big.js', PAYLOAD_LINE + '\n')
        result = scan_file(path, max_size=10)
        assert result.status == STATUS_TOO_LARGE
        assert result.findings == []

    def test_exactly_max_size_is_scanned(self, write_file):
        path = write_file('fit.js', PAYLOAD_LINE)
        result = scan_file(path, max_size=len(PAYLOAD_LINE))
        assert result.status == STATUS_SCANNED
        assert len(result.findings) == 1

    @pytest.mark.skipif(not hasattr(os, 'mkfifo'), reason='needs mkfifo')
    def test_fifo_not_opened(self, tmp_path):
        fifo = tmp_path / 'pipe'
        os.mkfifo(fifo)
        result = scan_file(fifo)
        assert result.status == STATUS_NOT_FILE

    @pytest.mark.skipif(os.name != 'posix' or os.geteuid() == 0,
                        reason='root ignores file permissions')
    def test_permission_denied(self, write_file):
        path = write_file('secret.js', PAYLOAD_LINE)
        path.chmod(0)
        try:
            result = scan_file(path)
        finally:
            path.chmod(0o644)
        assert result.status == STATUS_UNREADABLE
        assert result.findings == []


class TestBinaryContent:
    def test_binary_file_no_findings(self, write_file):
        path = write_file('logo.png', BINARY_JUNK * 20)
        result = scan_file(path)
        assert result.status == STATUS_PARTIAL
        assert result.findings == []

    def test_findings_before_decode_error_kept(self, write_file):
        content = (PAYLOAD_LINE + '\n').encode() + b'\xff\xfe garbage\n' + \
            (PAYLOAD_LINE + '\n').encode()
        path = write_file('mixed.bin', content)
        result = scan_file(path)
        assert result.status == STATUS_PARTIAL
        assert [f.line_num for f in result.findings] == [1]

    def test_whitespace_inside_binary_line_not_reported(self, write_file):
        path = write_file('blob.bin', b'\xff' + b' ' * 80 + b'\n')
        assert scan_file_findings(path) == []


class TestPreview:
    def test_short_line_unchanged(self):
        assert make_preview('abc') == 'abc'

    def test_exact_limit_unchanged(self):
        line = 'a' * PREVIEW_CHARS
        assert make_preview(line) == line

    def test_long_line_truncated(self):
        preview = make_preview('a' * 500)
        assert preview == 'a' * PREVIEW_CHARS + TRUNCATION_MARKER
        assert len(preview) == 123

    def test_multibyte_never_split(self):
        line = '日' * 300
        preview = make_preview(line)
        assert len(preview) <= 123
        assert preview[:PREVIEW_CHARS] == '日' * PREVIEW_CHARS
        preview.encode('utf-8')

    def test_preview_in_finding(self, write_file):
        line = 'var a;' + ' ' * 200 + 'eval(atob("..."))'
        path = write_file('long.js', line)
        finding = scan_file_findings(path)[0]
        assert finding.line_preview.endswith(TRUNCATION_MARKER)
        assert len(finding.line_preview) == 123
        assert finding.ws_count == 200
