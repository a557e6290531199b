# helixvcs

A small version control library that keeps its history in a `.helix`
directory next to your files. Objects are content-addressed with SHA-256
and stored raw-deflate compressed; commits can be signed with an Ed25519
key and verified later.

## Installation

```
pip install .
```

## Getting started

```python
from pathlib import Path

from helixvcs.commands.init import init_repository
from helixvcs.commands.add import add_files
from helixvcs.commands.commit import commit_changes
from helixvcs.core.repository import Repository
from helixvcs.utils.keys import generate_and_save_keypair, keypair_exists, load_keypair

if not keypair_exists():
    generate_and_save_keypair()        # stored in ~/.helix/keys/ed25519.key

init_repository("project")             # creates project/.helix with a "main" branch
repo = Repository.open("project")
add_files(repo, [Path("project")])     # returns (added, skipped)
commit = commit_changes(repo, "First commit", load_keypair())
print(commit.short_id, commit.verify())
```

Each command function prints a coloured report and also returns a value
you can use.

## Command functions

| Function | What it does |
| --- | --- |
| `commands.init.init_repository(path)` | Create a repository with an empty `main` branch |
| `commands.add.add_files(repo, paths)` | Stage files and directories; returns `(added, skipped)` |
| `commands.commit.commit_changes(repo, message, keypair)` | Commit the staged files; `keypair` may be `None` for an unsigned commit |
| `commands.status.show_status(repo)` | Report staged, modified and untracked files; returns path → state |
| `commands.log.show_log(repo, limit)` | History breadth-first from HEAD, with signature checks |
| `commands.log.show_dag(repo)` | The commit graph as indented lines |
| `commands.log.verify_history(repo, commit_id)` | Verify the signatures of a commit and all its ancestors |
| `commands.diff.show_diff(repo, path)` | Working files against the head commit; returns path → diff text |
| `commands.branch.list_branches(repo)` / `create_branch(repo, name)` | List or create branches |
| `commands.checkout.checkout_branch(repo, branch_name)` | Switch branch |
| `commands.merge.merge_branch(repo, branch_name, strategy)` | Three-way merge; `MergeStrategy.OURS`, `THEIRS` or `MANUAL` |
| `commands.reset.reset_repository(repo, target, mode)` | `soft`, `mixed` or `hard` reset to a commit |
| `commands.restore.restore_files(repo, paths)` | Bring files back from the head commit |

`Repository.add_remote(name, url)` records a remote in the repository's
metadata.

Files matching built-in patterns (`.git`, `target`, `node_modules`,
`*.log`, ...) and the lines of a `.helixignore` file are never staged.

## Configuration and keys

`helixvcs.utils.config.GlobalConfig` reads and writes `~/.helixconfig`
(TOML) with `user_name` and `user_email`; commits fall back to these when
the repository's own author details are unset (they can also be given
through the `HX_AUTHOR` and `HX_EMAIL` environment variables when a
repository is created). `helixvcs.utils.keys` generates, loads, imports
and exports the signing key.

## Packs

`helixvcs.utils.pack` bundles objects into a single byte stream (`Pack`,
`Pack.to_bytes`, `Pack.from_bytes`), builds copy/insert deltas
(`compute_delta`, `PackBuilder`) and selects the objects a peer lacks
(`create_thin_pack`).

## What it does not do

- There is no command-line program; everything is called from Python.
- Nothing talks to the network: remotes are only recorded, and there is
  no push, pull, fetch or clone.
- There is no stored authentication for remote hosts.

## Running the tests

```
pip install ".[test]"
pytest
```