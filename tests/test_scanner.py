from pathlib import Path

from psstyle.scanner import ScriptFile


def load(text):
    return ScriptFile(path=Path("sample.ps1"), text=text)


def test_commands_are_found_in_command_position_only():
    script = load(
        "$files = gci -Path $Path | % { $_.Name }\n"
        "Write-Output (Get-Date)\n"
        "if (Test-Path -Path $Path) { Get-Item -Path $Path }\n"
        "$table = @{ Name = 'value'; Count = 1 }\n"
    )

    names = [command.name for command in script.iter_commands()]

    assert names == ["gci", "%", "Write-Output", "Get-Date", "Test-Path", "Get-Item"]


def test_command_arguments_stop_at_the_pipeline():
    script = load("gci -Path $Path -Recurse | Sort-Object -Property Name\n")

    first, second = list(script.iter_commands())

    assert [token.text for token in first.arguments] == ["-Path", "$Path", "-Recurse"]
    assert second.name == "Sort-Object"


def test_parameter_value_honours_prefixes_and_colon_form():
    script = load(
        "Invoke-Command -Comp 'SRV01' -ScriptBlock { Get-Process }\n"
        "Get-CimInstance -ComputerName:'SRV02'\n"
        "Get-Thing -C 'SRV03'\n"
        "Get-Thing -ComputerName -Force\n"
    )
    commands = [command for command in script.iter_commands() if command.name != "Get-Process"]

    values = [command.parameter_value("ComputerName", "CN", min_prefix=4) for command in commands]

    assert values[0].value == "SRV01"
    assert values[1].value == "SRV02"
    assert values[2] is None
    assert values[3] is None
    assert commands[3].has_parameter("ComputerName")


def test_functions_expose_attributes_and_parameters():
    script = load(
        """function Get-Widget
{
    [CmdletBinding()]
    [OutputType([System.Collections.Hashtable])]
    param
    (
        [Parameter(Mandatory = $true)]
        [System.String]
        $Name,

        [Parameter()]
        [System.Int32]
        $Count = 5,

        $Untyped
    )
}

function script:Set-Thing([string] $Value, [switch] $Force) { }
"""
    )

    widget, thing = list(script.iter_functions())

    assert widget.name == "Get-Widget"
    assert widget.output_types == ["System.Collections.Hashtable"]
    assert [parameter.name for parameter in widget.parameters] == ["Name", "Count", "Untyped"]
    name, count, untyped = widget.parameters
    assert name.mandatory is True
    assert name.type_name == "System.String"
    assert [token.text for token in count.default] == ["5"]
    assert count.mandatory is False
    assert untyped.type_name is None

    assert thing.name == "script:Set-Thing"
    assert thing.short_name == "Set-Thing"
    assert [(parameter.name, parameter.type_name) for parameter in thing.parameters] == [
        ("Value", "string"),
        ("Force", "switch"),
    ]


def test_mandatory_false_is_not_mandatory():
    script = load("function Get-Item2 { param ([Parameter(Mandatory = $false)] [string] $Name) }\n")

    (function,) = list(script.iter_functions())

    assert function.parameters[0].mandatory is False


def test_catch_blocks_treat_comments_as_empty():
    script = load(
        """try { Get-Item -Path $Path } catch { }
try
{
    Remove-Item -Path $Path
}
catch
{
    # ignored
}
try { Stop-Service -Name $Name } catch [System.Exception] { throw }
"""
    )

    blocks = list(script.iter_catch_blocks())

    assert [block.keyword.line for block in blocks] == [1, 6, 10]
    assert [block.is_empty for block in blocks] == [True, True, False]


def test_comparisons_capture_operands():
    script = load("if ($a -eq $null -or $b -ne 1) { $c -like 'x*' }\n")

    comparisons = list(script.iter_comparisons())

    assert [comparison.operator.text for comparison in comparisons] == ["-eq", "-ne", "-like"]
    assert comparisons[0].left.text == "$a"
    assert comparisons[0].right.text == "$null"


def test_inline_directives_are_read_from_comments():
    script = load(
        "# psstyle: disable-file=write_host\n"
        "Write-Host 'a' # psstyle: disable=avoid_aliases, global_variables\n"
        "# psstyle: disable-next-line=all\n"
        "gci\n"
    )

    directives = script.directives

    assert directives.covers("write_host", 99)
    assert directives.covers("avoid_aliases", 2)
    assert directives.covers("global_variables", 2)
    assert not directives.covers("avoid_aliases", 3)
    assert directives.covers("whitespace", 4)


def test_string_lines_cover_multiline_strings():
    script = load("$text = @'\nline one\nline two\n'@\nWrite-Output $text\n")

    assert script.string_lines == {1, 2, 3, 4}
    assert script.line_text(5) == "Write-Output $text"
    assert script.line_text(42) == ""


def test_load_reads_file_and_strips_bom(tmp_path):
    path = tmp_path / "script.ps1"
    path.write_text("\ufeffGet-Date\n", encoding="utf-8")

    script = ScriptFile.load(path)

    assert script.lines == ["Get-Date"]
    assert [command.name for command in script.iter_commands()] == ["Get-Date"]


def test_commands_after_a_param_block_are_found():
    script = load(
        "Invoke-Command -ScriptBlock { param($Path) gci -Path $Path }\n"
        "function Show-It { param([string] $Name) Write-Host $Name }\n"
    )

    names = [command.name for command in script.iter_commands()]

    assert names == ["Invoke-Command", "gci", "Write-Host"]


def test_enum_members_are_not_commands():
    script = load("enum SortOrder { Sort; Select }\nenum Flags { A = 1\n B = 2 }\nGet-Item -Path .\n")

    names = [command.name for command in script.iter_commands()]

    assert names == ["Get-Item"]


def test_parameter_index_points_at_the_value():
    script = load("Get-CimInstance -ComputerName @('srv1', $other) -ClassName Win32_BIOS\n")
    (command,) = list(script.iter_commands())

    index = command.parameter_index("ComputerName", min_prefix=4)

    assert command.arguments[index].is_punct("@(")
    assert command.parameter_index("Credential") is None


def test_lines_split_only_on_newlines():
    script = load("Get-Date\n\x0c\nWrite-Host 'x'\r\n")

    assert len(script.lines) == 3
    assert script.line_text(3) == "Write-Host 'x'"
