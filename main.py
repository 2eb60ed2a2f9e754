from datetime import timedelta

from rich.pretty import pprint

from envflag import *

set_env_prefix("DEMO")

port = integer("port", 8080, "listen `port`")
debug = boolean("debug", False, "enable debug output")
timeout = duration("timeout", timedelta(seconds=30), "request timeout")
hosts = string("hosts", "localhost", "comma-separated upstream hosts")


if __name__ == '__main__':
    parse()
    # flags that follow the verbs are read from the remainder
    if verbs := get_verbs():
        parse(args()[len(verbs):])
    pprint({
        "verbs": verbs,
        "port": port.value,
        "debug": debug.value,
        "timeout": timeout.value,
        "hosts": split_list(hosts.value),
        "args": args(),
    })
