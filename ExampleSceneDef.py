import ray
from ImLite import *
from utils import *


class ExampleSceneDef(object):
    def __init__(self, camera, scene):
        self.camera = camera;
        self.scene = scene;

    def render(self, output_path=None, output_shape=None):
        if(output_shape is None):
            output_shape=[256,256];
        pix = ray.render_image(self.camera, self.scene, output_shape[1], output_shape[0]);
        im = Image(pixels=pix);
        if(output_path is None):
            return im;
        else:
            im.writeToFile(output_path);
            return im;


def ReferenceSceneExample():
    red = ray.Sphere(vec([0, -1, 3]), 1, color=vec([255, 0, 0]), specular=500)
    ground = ray.Sphere(vec([0, -5001, 0]), 5000, color=vec([255, 255, 0]), specular=1000)

    scene = ray.Scene([red, ground], [
        ray.AmbientLight(0.2),
        ray.PointLight(vec([2, 1, 0]), 0.6),
        ray.DirectionalLight(vec([1, 4, 4]), 0.2),
    ])
    camera = ray.Camera()
    return ExampleSceneDef(camera=camera, scene=scene);


def ThreeSpheresExample():
    scene = ray.Scene([
        ray.Sphere(vec([0, -1, 3]), 1, color=vec([255, 0, 0]), specular=500),
        ray.Sphere(vec([2, 0, 4]), 1, color=vec([0, 255, 0]), specular=500),
        ray.Sphere(vec([-2, 0, 4]), 1, color=vec([0, 0, 255]), specular=10),
        # Make a big sphere for the floor
        ray.Sphere(vec([0, -5001, 0]), 5000, color=vec([255, 255, 0]), specular=1000),
    ])

    scene.add_light(ray.AmbientLight(0.2))
    scene.add_light(ray.PointLight(vec([2, 1, 0]), 0.6))
    scene.add_light(ray.DirectionalLight(vec([1, 4, 4]), 0.2))

    camera = ray.Camera()
    return ExampleSceneDef(camera=camera, scene=scene);


EXAMPLES = {
    'reference': ReferenceSceneExample,
    'three_spheres': ThreeSpheresExample,
}
