from adapter.external.remote_dictionary import RemoteDictionaryAdapter
from port.dictionary import DictionaryPort


def get_dictionary_port() -> DictionaryPort:
    return RemoteDictionaryAdapter()
