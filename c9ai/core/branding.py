"""Banner and help text"""

from .. import __version__

BANNER = r"""
   ____ ___      _    ___
  / ___/ _ \    / \  |_ _|
 | |  | (_) |  / _ \  | |
 | |___\__, | / ___ \ | |
  \____| /_/ /_/   \_\___|
"""

HELP_TEXT = """
📖 C9 AI Commands

Shell & sessions
  !<command>              Run a shell command (!cd <dir> changes directory)
  @claude [prompt]        Claude session (interactive without a prompt)
  @gemini [prompt]        Gemini session
  @local [prompt]         Ask the local model (chat loop without a prompt)
  @conv / @chat <text>    Treat input as conversation
  @cmd / @command <text>  Treat input as a command
  @tool <text>            Run a registered tool (name key=value, or free text)

Commands
  claude|gemini <prompt>  One-shot cloud prompt
  switch <model>          Default model: claude, gemini, local
  todos [list|add|actions|execute]
  add <task>              Add a todo
  tools [list|add|edit|remove|run]
  models [list|install|remove|status] [name]
  scan [dirs...]          Build a knowledge base from local files
  issues                  List open GitHub issues (needs gh)
  achieve|goal <goal>     Run a multi-step goal ("... then ...")
  analytics               Usage statistics
  config                  Show configuration
  logo|banner             Show the banner
  help                    This help

Natural language
  open excel · list files · search for python tutorials · check disk usage
  compile my research paper · run backup.sh · create a python program for fibonacci

Type 'exit' to quit, 'emergency exit' to force quit.
"""


def banner(model: str = "") -> str:
    text = BANNER + f"\n  🤖 C9 AI v{__version__} - your command-line assistant\n"
    if model:
        text += f"  Current model: {model.upper()}\n"
    return text
