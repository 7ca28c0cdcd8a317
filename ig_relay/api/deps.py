from ig_relay.core.container import Container


def get_container() -> Container:
    return Container()
