# api - REST surface over the beamcraft engine
