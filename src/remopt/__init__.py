"""
remopt
======

Client-side controller for a remote hyperparameter-tuning service.

Define an experiment, ask the service for parameter suggestions, report outcomes
back and keep a local view of the experiment consistent with the remote store.

"""
