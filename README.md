# ttpforge

Building blocks for working with TTPs (tactics, techniques and procedures)
that are written as YAML files and kept in repositories: finding them,
checking their layout, extracting values from step output, running commands
with captured output, removing paths and configuring logging.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `ttpforge.fsys`: the `FileSystem` interface (`exists`, `is_dir`,
  `read_file`, `write_file`, `mkdir_all`, `remove_all`, `walk`) with two
  implementations. `OsFileSystem` works on the real disk; `MemoryFileSystem`
  keeps everything in memory with `/`-separated paths. `make_test_fs(files)`
  builds a `MemoryFileSystem` from a mapping of path to contents (bytes or
  text).
- `ttpforge.results`: the dataclasses `ActResult` (`stdout`, `stderr`,
  `outputs`), `ExecutionResult` (an `ActResult` with an optional `cleanup`
  result) and `StepResultsRecord` (`by_name`, `by_index`, and `add(name,
  result)` to record under both). `aggregate_results(results)` concatenates
  the stdout and stderr of several results, skipping `None`.
- `ttpforge.iocapture`: `stream_and_capture(args, stdout=None, stderr=None,
  env=None, cwd=None)` runs a command, copies its output to the given text
  streams (the process's own stdout and stderr by default) and returns an
  `ActResult` with what was captured. A non-zero exit raises
  `subprocess.CalledProcessError`, which carries the captured output.
- `ttpforge.preprocess`: `parse(ttp_bytes)` checks that the top-level key
  `steps:` appears exactly once and is the last top-level key, and returns a
  `PreprocessResult` with `preamble_bytes` (everything before `steps:`) and
  `steps_bytes` (the key itself). Problems raise `PreprocessError`.
- `ttpforge.outputs`: `JSONFilter(path)` selects a value from a JSON document
  with a dotted path such as `foo.bar`; array elements are addressed by
  index, `#` gives an array's length, and `\` escapes a dot. `Spec` chains
  filters; build one with `Spec.from_yaml(text)` or `Spec.from_dict(data)`.
  `parse(specs, in_str)` applies a mapping of named specs and returns a
  mapping of named values. A missing path or a spec without valid filters
  raises `OutputError`.
- `ttpforge.logs`: `init_log(LogConfig(verbose=..., log_file=...,
  no_color=..., stacktrace=...))` configures the package logger, which writes
  to stderr and, if a log file is given, to that file as well. Verbose mode
  lowers the level to debug and adds time and caller to each line; `no_color`
  drops the ANSI colours on level names; `stacktrace` attaches the call stack
  to error records. `get_logger()` returns the logger. A default
  configuration is applied on import.
- `ttpforge.removepath`: `RemovePathAction(path, recursive=False,
  file_system=None)` deletes a path when executed. A missing path, or a
  directory without `recursive=True`, raises `RemovePathError`; so does
  `validate()` when `path` is empty.
- `ttpforge.repo`: `RepoSpec(name, path, git=GitConfig(url, branch))`
  describes a repository. `RepoSpec.load(fsys, base_path)` clones it with
  `git` if it is missing and a URL is given (branch `main` by default), then
  reads its `ttpforge-repo-config.yaml` (`ttp_search_paths`,
  `template_search_paths`) and returns a `Repo`. `Repo.find_ttp`,
  `Repo.find_template` and `Repo.list_ttps` search those paths; listings are
  references of the form `name//path/to/ttp.yaml`. Problems raise
  `RepoError`.
- `ttpforge.repocollection`: `RepoCollection(fsys, specs, base_path)` loads
  several repositories, rejecting duplicate names. `get_repo(name)` returns
  one; `list_ttps()` lists the TTPs of all of them; `resolve_ttp_ref(ref)`
  accepts either `repo//path/to/ttp.yaml` or a plain path to an existing
  file, in which case the repository is found by walking up to the nearest
  directory holding a `ttpforge-repo-config.yaml`.

## Example

```python
from ttpforge.fsys import make_test_fs
from ttpforge.repo import RepoSpec
from ttpforge.repocollection import RepoCollection

fsys = make_test_fs({
    "repos/a/ttpforge-repo-config.yaml": b'ttp_search_paths: ["ttps"]',
    "repos/a/ttps/hello.yaml": b"placeholder",
})

collection = RepoCollection(fsys, [RepoSpec(name="default", path="repos/a")], "")
repo, path = collection.resolve_ttp_ref("default//hello.yaml")
print(repo.name, path)  # default repos/a/ttps/hello.yaml
```

Extracting a value from JSON output:

```python
from ttpforge.outputs import Spec

spec = Spec.from_yaml("filters:\n  - json_path: foo.bar")
print(spec.apply('{"foo": {"bar": "baz"}}'))  # baz
```

## What it does not do

The package provides the pieces above and nothing that ties them together.
It does not parse or template whole TTP documents, does not run a TTP's
steps or their cleanup, has no step types other than `RemovePathAction`,
and has no command-line interface.