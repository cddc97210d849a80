from pathlib import Path
import json
import os
import subprocess
import sys
import tempfile
import unittest

from sarif_report.cli import main


def _write_sarif(path: Path, results: list[dict]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "version": "2.1.0",
        "runs": [{"tool": {"driver": {"name": "CodeQL", "rules": []}}, "results": results}],
    }
    path.write_text(json.dumps(payload), encoding="utf-8")


class CLIE2ETests(unittest.TestCase):
    def test_positional_arguments_e2e(self):
        root = Path(__file__).resolve().parents[1]
        with tempfile.TemporaryDirectory() as tmp:
            tmp_path = Path(tmp)
            results = tmp_path / "codeql-results"
            _write_sarif(
                results / "javascript.sarif",
                [
                    {
                        "ruleId": "js/unused-var",
                        "level": "error",
                        "message": {"text": "variable x is unused"},
                        "locations": [
                            {
                                "physicalLocation": {
                                    "artifactLocation": {"uri": "src/app.js"},
                                    "region": {"startLine": 10, "startColumn": 3},
                                }
                            }
                        ],
                    }
                ],
            )
            (results / "broken.sarif").write_text("{", encoding="utf-8")
            output = tmp_path / "report.html"

            env = os.environ.copy()
            env["PYTHONPATH"] = str(root / "src")

            proc = subprocess.run(
                [sys.executable, "-m", "sarif_report.cli", str(results), str(output)],
                cwd=root,
                text=True,
                capture_output=True,
                env=env,
                check=True,
            )

            self.assertEqual(proc.stdout.strip(), f"Wrote 2 result(s) to {output}")
            html = output.read_text(encoding="utf-8")
            self.assertIn(
                "<td>js/unused-var</td><td>Error</td><td>js/unused-var</td>"
                "<td>variable x is unused</td><td><code>src/app.js:10:3</code></td>",
                html,
            )
            self.assertIn("<td>Parse error</td>", html)
            self.assertIn("2 finding(s).", html)

    def test_unwritable_output_exits_non_zero(self):
        root = Path(__file__).resolve().parents[1]
        with tempfile.TemporaryDirectory() as tmp:
            tmp_path = Path(tmp)
            results = tmp_path / "codeql-results"
            _write_sarif(results / "py.sarif", [{"ruleId": "py/a", "level": "error"}])
            blocker = tmp_path / "not-a-dir"
            blocker.write_text("plain file", encoding="utf-8")
            output = blocker / "report.html"

            env = os.environ.copy()
            env["PYTHONPATH"] = str(root / "src")

            proc = subprocess.run(
                [sys.executable, "-m", "sarif_report.cli", str(results), str(output)],
                cwd=root,
                text=True,
                capture_output=True,
                env=env,
            )

            self.assertNotEqual(proc.returncode, 0)
            self.assertEqual(proc.stdout, "")
            self.assertFalse(output.exists())

    def test_config_file_e2e(self):
        with tempfile.TemporaryDirectory() as tmp:
            tmp_path = Path(tmp)
            _write_sarif(tmp_path / "sarif" / "py.sarif", [{"ruleId": "py/a"}, {"ruleId": "py/b"}])
            output = tmp_path / "reports" / "codeql.html"
            config = tmp_path / "codeql-config.yml"
            config.write_text(
                "name: test\n"
                "html-report:\n"
                f"  sarif-dir: {tmp_path / 'sarif'}\n"
                f"  output: {output}\n",
                encoding="utf-8",
            )

            exit_code = main([str(config)])

            self.assertEqual(exit_code, 0)
            html = output.read_text(encoding="utf-8")
            self.assertIn("2 finding(s).", html)
            self.assertIn('<tr class="high"><td>py/a</td><td>Warning</td>', html)

    def test_empty_directory_e2e(self):
        with tempfile.TemporaryDirectory() as tmp:
            tmp_path = Path(tmp)
            output = tmp_path / "report.html"

            exit_code = main([str(tmp_path / "missing"), str(output)])

            self.assertEqual(exit_code, 0)
            html = output.read_text(encoding="utf-8")
            self.assertIn("No results.", html)
            self.assertIn("0 finding(s).", html)


if __name__ == "__main__":
    unittest.main()
