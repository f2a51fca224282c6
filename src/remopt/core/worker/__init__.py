"""
Experiment state and job lifecycle
==================================

Local cache, synchronizer and job manager working against a remote experiment store.

"""
