# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

from hypothesis import given, strategies as st

from termvfs.shell import ParsedCommand, parse_command, tokenize


class TestTokenize:
    def test_splits_on_whitespace(self) -> None:
        assert tokenize("ls   /sandbox\tnotes") == ["ls", "/sandbox", "notes"]

    def test_blank_line(self) -> None:
        assert tokenize("") == []
        assert tokenize("   \t ") == []

    def test_double_quotes_group(self) -> None:
        assert tokenize('write notes.txt "buy milk"') == ["write", "notes.txt", "buy milk"]

    def test_single_quotes_group(self) -> None:
        assert tokenize("echo 'a  b'") == ["echo", "a  b"]

    def test_other_quote_is_literal_inside_region(self) -> None:
        assert tokenize("echo \"it's\"") == ["echo", "it's"]

    def test_quotes_join_adjacent_text(self) -> None:
        assert tokenize('echo pre"fix suf"fix') == ["echo", "prefix suffix"]

    def test_unterminated_quote_runs_to_end(self) -> None:
        assert tokenize("echo 'unterminated text") == ["echo", "unterminated text"]

    def test_empty_quotes_produce_no_token(self) -> None:
        assert tokenize('echo ""') == ["echo"]


class TestParseCommand:
    def test_lowercases_command_only(self) -> None:
        assert parse_command("MKDIR Notes") == ParsedCommand(command="mkdir", args=("Notes",))

    def test_empty(self) -> None:
        parsed = parse_command("   ")

        assert parsed.is_empty
        assert parsed.args == ()


_words = st.lists(
    st.text(
        alphabet=st.characters(blacklist_characters="'\"", blacklist_categories=("Cs",)),
        min_size=1,
    ).filter(lambda word: not any(char.isspace() for char in word)),
    max_size=6,
)


@given(_words)
def test_unquoted_words_round_trip(words: list[str]) -> None:
    assert tokenize(" ".join(words)) == words
