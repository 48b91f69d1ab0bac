"""BookSwap: peer-to-peer book swap marketplace backend."""
