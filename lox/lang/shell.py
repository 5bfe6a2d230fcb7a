"""Handles interactive/command-line mode for the Lox interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information, 'exit' or Ctrl-D to quit."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    @staticmethod
    def needs_continuation(line):
        """Whether or not line has unclosed braces or parentheses (string contents and comments are ignored)."""
        depth = 0
        in_string = in_comment = False
        for i, char in enumerate(line):
            if in_comment:
                in_comment = char != "\n"
            elif char == '"':
                in_string = not in_string
            elif in_string:
                continue
            elif line.startswith("//", i):
                in_comment = True
            elif char in "({":
                depth += 1
            elif char in ")}":
                depth -= 1
        return depth > 0

    def default(self, line):
        """Executes arbitrary Lox source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line = self._tmp_line + line

            if self.needs_continuation(line):
                self._tmp_line = line + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if self.sess.run(line) and self.sess.results:
                print(self.sess.pop())

    def onecmd(self, line):
        """Every line of a continued entry is source, even if it starts with a command name."""
        if self._tmp_line and line != "EOF":
            return self.default(line)
        return super().onecmd(line)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return self.default(f"help {arg}")
        print("Welcome to the Lox interpreter!\n\n"
              "Lox is a small dynamically-typed scripting language with numbers, strings, booleans, nil,\n"
              "first-class functions and closures. Each entry is run as soon as it is complete; globals\n"
              "are kept between entries.\n\n"
              "Try it out by typing 'var greeting = \"hello\";', then 'print greeting + \" world\";'.\n"
              "Functions are declared with 'fun name(a, b) { return a + b; }'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit("")

    def do_exit(self, arg):
        """Exits interpreter. Anything after 'exit' is Lox source (e.g. an assignment to a variable named exit)."""
        if arg:
            return self.default(f"exit {arg}")
        return True
