from pathlib import Path

from psstyle.result import ScanResult
from psstyle.rules import ScanContext
from psstyle.rules.plaintext_password import PlaintextPasswordRule
from psstyle.scanner import ScriptFile

SCRIPT = """function Connect-Share
{
    param
    (
        [System.String]
        $Password,

        $AdminPwd,

        [System.Security.SecureString]
        $SecurePassword,

        [System.Management.Automation.PSCredential]
        $Credential
    )

    $secure = ConvertTo-SecureString -String $Password -AsPlainText -Force
    $other = ConvertTo-SecureString -String $Encrypted
}
"""


def run_rule(text):
    context = ScanContext(scripts=[ScriptFile(path=Path("test.ps1"), text=text)])
    result = ScanResult()
    PlaintextPasswordRule().scan(context, result)
    return result


def test_plain_text_conversion_is_high():
    result = run_rule(SCRIPT)

    high = [finding for finding in result.findings if finding.severity.value == "HIGH"]
    assert len(high) == 1
    assert high[0].line == 17


def test_string_and_untyped_password_parameters_are_medium():
    result = run_rule(SCRIPT)

    medium = [finding for finding in result.findings if finding.severity.value == "MEDIUM"]
    assert [finding.line for finding in medium] == [6, 8]
    assert "$Password" in medium[0].title
    assert "$AdminPwd" in medium[1].title


def test_abbreviated_switch_is_recognised():
    result = run_rule("ConvertTo-SecureString 'p@ss' -AsPlain -Force\n")

    assert result.summary.high == 1
