"""Now playing and upcoming schedule service for VirtualDJ Radio channels."""
