from rolekeeper.main import run

run()
