"""Allow running velotype with: python -m velotype"""

from velotype.runner import main

if __name__ == "__main__":
    main()
