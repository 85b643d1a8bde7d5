"""Contract boundary: query encoding, typed query/execute variants, REST client."""

from predictx.contract.client import ContractClient, smart_query_url
from predictx.contract.encoding import decode_query, encode_msg, encode_query

__all__ = ["ContractClient", "smart_query_url", "encode_query", "encode_msg", "decode_query"]
