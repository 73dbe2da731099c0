"""Adapters: everything that touches files, the network or third-party SDKs."""
