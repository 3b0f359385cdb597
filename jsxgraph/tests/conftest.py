import pytest
from pathlib import Path
from typing import Generator, List, Tuple
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from jsxgraph.errors import FormatError
from jsxgraph.graph import GraphStore
from jsxgraph.patch import PrettierFormatter


class RecordingFormatter(PrettierFormatter):
    """Formatter double that records calls instead of running Prettier."""

    def __init__(self, fail: bool = False, suffix: str = ""):
        super().__init__(enabled=True)
        self.fail = fail
        self.suffix = suffix
        self.calls: List[Tuple[str, str]] = []

    def format(self, text: str, file_path: str) -> str:
        self.calls.append((text, file_path))
        if self.fail:
            raise FormatError("formatter rejected the source")
        return text + self.suffix


@pytest.fixture
def store() -> GraphStore:
    """Fresh graph store for each test."""
    return GraphStore()


@pytest.fixture
def formatter() -> RecordingFormatter:
    return RecordingFormatter()


@pytest.fixture
def suffix_formatter() -> RecordingFormatter:
    return RecordingFormatter(suffix="// formatted\n")


@pytest.fixture
def failing_formatter() -> RecordingFormatter:
    return RecordingFormatter(fail=True)


@pytest.fixture
def plain_formatter() -> PrettierFormatter:
    """Formatter that passes text through untouched."""
    return PrettierFormatter(enabled=False)


APP_SOURCE = """import logo from './logo.svg';

function handleClick() {
  track('click');
}

export function App() {
  const onSave = () => {
    save();
  };
  return (
    <main className="app">
      <img src={logo} alt="logo" />
      <a href="https://example.com">Docs</a>
      <button onClick={handleClick} onSubmit={() => submit()}>Go</button>
      <Header title={`Hello ${name}`} />
    </main>
  );
}
"""

LIST_SOURCE = """export const List = ({ items }) => (
  <ul>
    <>
      {items.map((item) => (
        <li key={item}>{item}</li>
      ))}
    </>
  </ul>
);
"""


@pytest.fixture
def temp_project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a small JSX project on disk."""
    src = tmp_path / "src"
    (src / "components").mkdir(parents=True)
    (src / "App.tsx").write_text(APP_SOURCE, encoding="utf-8")
    (src / "components" / "List.jsx").write_text(LIST_SOURCE, encoding="utf-8")
    (src / "util.ts").write_text("export function add(a: number, b: number) {\n  return a + b;\n}\n", encoding="utf-8")

    # Files that must never be touched
    (tmp_path / "node_modules" / "lib").mkdir(parents=True)
    (tmp_path / "node_modules" / "lib" / "Ignored.tsx").write_text("export const X = () => <div />;\n", encoding="utf-8")
    (tmp_path / "README.md").write_text("# Project\n", encoding="utf-8")

    yield tmp_path
